# =============================================================================
# main.py  -  Demonstration client for the rjina MCP server
# =============================================================================
#
# HOW TO RUN:
#   python main.py                          (server runs in-process)
#   python main.py https://rjina.example    (connects to <origin>/mcp)
#
# WHAT HAPPENS:
#   1. Connects an MCP client to the server
#   2. Prints the tools the server exposes
#   3. Calls fetch_url_content on a test page
#   4. Prints the result content, or the error content if isError is set
#
# The in-process mode needs no network for steps 1-2; step 3 always goes
# out to the Jina Reader API.
# =============================================================================

import asyncio
import json
import sys

from fastmcp import Client

DEFAULT_TEST_URL = "https://example.com/"


def _target(argv: list[str]):
    """Either a server URL (when an origin is given) or the in-process server."""
    if len(argv) > 1:
        origin = argv[1].rstrip("/")
        return f"{origin}/mcp"

    from tools.mcp_server import mcp
    return mcp


async def run_demo(argv: list[str]) -> int:
    target = _target(argv)
    print(f"Connecting to MCP server at: {target if isinstance(target, str) else 'in-process'}")

    async with Client(target) as client:
        print("Connected to server.")

        tools = await client.list_tools()
        print("Available Tools:", json.dumps([t.model_dump(mode="json") for t in tools], indent=2))

        if not any(t.name == "fetch_url_content" for t in tools):
            print("'fetch_url_content' tool not found in server capabilities.")
            return 1

        # Optional extras: api_key, target_selector, output_format="markdown"...
        tool_args = {
            "url": DEFAULT_TEST_URL,
            "output_format": "text",
            "generate_image_alt": True,
            "no_cache": True,
        }
        print("\nAttempting to call 'fetch_url_content' tool...")
        print("Calling with arguments:", tool_args)

        result = await client.call_tool("fetch_url_content", tool_args, raise_on_error=False)
        content = json.dumps([c.model_dump(mode="json") for c in result.content], indent=2)

        print("\nResult from 'fetch_url_content':")
        if result.is_error:
            print("Tool Error:", content, file=sys.stderr)
            return 1
        print(content)

    print("\nConnection closed.")
    return 0


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(asyncio.run(run_demo(sys.argv)))
