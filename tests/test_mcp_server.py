"""End-to-end tests through the FastMCP in-memory client."""

from __future__ import annotations

import json
import logging

import pytest
from fastmcp import Client

from core.config import Settings
from tools.mcp_server import build_server


async def _call(fake, tool: str, arguments: dict):
    server = build_server(Settings(), client_factory=fake)
    async with Client(server) as client:
        return await client.call_tool(tool, arguments, raise_on_error=False)


@pytest.mark.asyncio()
async def test_server_exposes_three_tools(upstream) -> None:
    server = build_server(Settings(), client_factory=upstream())

    async with Client(server) as client:
        tools = await client.list_tools()

    assert {tool.name for tool in tools} == {"fetch_url_content", "search", "searchGoogleFlights"}


@pytest.mark.asyncio()
async def test_fetch_success_returns_one_text_item(upstream) -> None:
    result = await _call(upstream(200, "# Title\nBody"), "fetch_url_content",
                         {"url": "https://example.com/"})

    assert result.is_error is False
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.content[0].text == "# Title\nBody"


@pytest.mark.asyncio()
async def test_fetch_upstream_error_sets_error_flag(upstream) -> None:
    result = await _call(upstream(404, "not found"), "fetch_url_content",
                         {"url": "https://example.com/missing"})

    assert result.is_error is True
    assert len(result.content) == 1
    assert "404" in result.content[0].text
    assert "not found" in result.content[0].text


@pytest.mark.asyncio()
async def test_fetch_network_fault_sets_error_flag(failing_upstream) -> None:
    result = await _call(failing_upstream("ECONNRESET"), "fetch_url_content",
                         {"url": "https://example.com/"})

    assert result.is_error is True
    assert "ECONNRESET" in result.content[0].text


@pytest.mark.asyncio()
async def test_relative_url_is_rejected_before_any_request(upstream) -> None:
    fake = upstream(200, "unused")

    result = await _call(fake, "fetch_url_content", {"url": "example.com/page"})

    assert result.is_error is True
    assert "url" in result.content[0].text
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_fetch_forwards_headers_from_tool_arguments(upstream) -> None:
    fake = upstream(200, "ok")

    await _call(fake, "fetch_url_content", {
        "url": "https://example.com/",
        "api_key": "jina-key",
        "output_format": "markdown",
        "timeout": 10,
    })

    sent = fake.last
    assert sent.headers["Authorization"] == "Bearer jina-key"
    assert sent.headers["X-Respond-With"] == "markdown"
    assert sent.headers["X-Timeout"] == "10"
    assert "X-No-Cache" not in sent.headers


@pytest.mark.asyncio()
@pytest.mark.parametrize(("tool", "arguments"), [
    ("fetch_url_content", {"url": "https://example.com/", "cache_tolerance": -1}),
    ("fetch_url_content", {"url": "https://example.com/", "timeout": -1}),
    ("fetch_url_content", {"url": "https://example.com/", "proxy_url": "not-a-url"}),
    ("fetch_url_content", {"url": "https://example.com/", "output_format": "pdf"}),
    ("searchGoogleFlights", {"api_key": "serp", "flight_type": "4"}),
], ids=["negative-cache-tolerance", "negative-timeout", "relative-proxy-url",
        "unknown-output-format", "unknown-flight-type"])
async def test_schema_violations_never_reach_upstream(upstream, tool: str, arguments: dict) -> None:
    fake = upstream(200, "unused")

    result = await _call(fake, tool, arguments)

    assert result.is_error is True
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_non_ascii_cookie_is_an_error_result(upstream) -> None:
    fake = upstream(200, "unused")

    result = await _call(fake, "fetch_url_content",
                         {"url": "https://example.com/", "cookies": "name=José"})

    assert result.is_error is True
    assert result.content[0].text.startswith("Network error fetching URL: ")
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_search_count_above_limit_is_rejected(upstream) -> None:
    fake = upstream(200, "unused")

    result = await _call(fake, "search", {"q": "x", "api_key": "k", "count": 21})

    assert result.is_error is True
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_search_requires_api_key(upstream) -> None:
    fake = upstream(200, "unused")

    result = await _call(fake, "search", {"q": "x"})

    assert result.is_error is True
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_search_sends_repeated_filters(upstream) -> None:
    fake = upstream(200, "results")

    result = await _call(fake, "search", {
        "q": "annual report",
        "api_key": "k",
        "site": ["a.com", "b.com"],
        "count": 5,
        "num": 5,
    })

    assert result.is_error is False
    params = fake.last.url.params
    assert params.get_list("site") == ["a.com", "b.com"]
    assert params["count"] == "5"
    assert params["num"] == "5"
    assert params["fallback"] == "true"
    assert params["type"] == "web"


@pytest.mark.asyncio()
async def test_flight_rule_violation_is_an_error_result(upstream) -> None:
    fake = upstream(200, json={})

    result = await _call(fake, "searchGoogleFlights", {"api_key": "serp", "flight_type": "1"})

    assert result.is_error is True
    assert result.content[0].text.startswith("Input validation error: ")
    assert "return_date" in result.content[0].text
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_flight_date_pattern_is_enforced(upstream) -> None:
    fake = upstream(200, json={})

    result = await _call(fake, "searchGoogleFlights",
                         {"api_key": "serp", "flight_type": "2", "outbound_date": "19/05/2025"})

    assert result.is_error is True
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_flight_success_returns_pretty_json(upstream) -> None:
    payload = {"best_flights": [{"price": 512}]}
    fake = upstream(200, json=payload)

    result = await _call(fake, "searchGoogleFlights", {
        "api_key": "serp",
        "flight_type": "2",
        "departure_id": "JFK",
        "arrival_id": "LHR",
        "outbound_date": "2025-05-19",
        "async_search": False,
    })

    assert result.is_error is False
    assert result.content[0].text == json.dumps(payload, indent=2)
    params = fake.last.url.params
    assert params["async"] == "false"
    assert params["type"] == "2"
    assert "flight_type" not in params


@pytest.mark.asyncio()
async def test_api_keys_are_not_logged(upstream, caplog) -> None:
    caplog.set_level(logging.INFO, logger="tools.mcp_server")

    await _call(upstream(200, "ok"), "search", {"q": "x", "api_key": "super-secret"})

    assert "super-secret" not in caplog.text
    assert "search called with" in caplog.text
