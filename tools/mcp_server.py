# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the three MCP tools.  Each tool is a thin wrapper around a core/
#   translator: it declares the parameter schema, builds the request record,
#   and hands the translator's result back over MCP.
#
# HOW IT WORKS (the flow):
#   1. A client calls a tool by name via MCP (e.g., "fetch_url_content")
#   2. FastMCP validates the arguments against the function signature
#      (types, ranges, enums, date patterns) and rejects bad input before
#      the function body runs
#   3. The function builds a frozen request record (core/models.py)
#   4. The core translator validates cross-field rules, sends ONE HTTP
#      request, and returns a ToolEnvelope
#   5. Success -> the text is returned.  Failure -> ToolError is raised with
#      the error text, which FastMCP reports as a result with isError=true
#
# TOOLS:
#   fetch_url_content    Jina Reader (r.jina.ai): a page as markdown/html/text
#   search               Jina Search (s.jina.ai): web, image or news results
#   searchGoogleFlights  SerpApi Google Flights: flight options as JSON
#
# RUNNING THIS SERVER:
#   python -m tools.mcp_server                      (stdio)
#   RJINA_TRANSPORT=http python -m tools.mcp_server (streamable HTTP on /mcp)
# =============================================================================

import logging
import sys
from typing import Annotated, Any, Literal, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from core.config import Settings, load_settings
from core.content_fetch import content_fetch_translator
from core.flight_search import flight_search_translator
from core.models import (
    Emissions,
    FetchRequest,
    FlightSearchRequest,
    FlightType,
    OutputFormat,
    SearchOutputFormat,
    SearchProvider,
    SearchRequest,
    SearchType,
    SortBy,
    Stops,
    ToolEnvelope,
    TravelClass,
)
from core.schema import AbsoluteUrl, IsoDate, NonNegativeInt, ResultCount
from core.search import search_translator
from core.translator import ClientFactory

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because under the stdio transport the MCP messages travel
# over STDOUT.  A log line on stdout would corrupt the protocol stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for successful responses
#     - YELLOW for error responses
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

# Never written to the log in clear.
_SECRET_PARAMS = {"api_key", "cookies"}

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def _mask(name: str, value: Any) -> Any:
    if name in _SECRET_PARAMS and value:
        return "***"
    return value


def _log_request(tool_name: str, **params: Any) -> None:
    """Log an incoming tool call with its (given) parameters in CYAN."""
    param_str = ", ".join(
        f"{k}={_mask(k, v)!r}" for k, v in params.items() if v not in (None, ())
    )
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _respond(tool_name: str, envelope: ToolEnvelope) -> str:
    """Log the outcome, then return the text or raise it as a ToolError."""
    if envelope.is_error:
        logger.info(f"{_YELLOW}  ← {tool_name} error: {envelope.text[:200]}{_RESET}")
        raise ToolError(envelope.text)
    logger.info(f"{_GREEN}  ← {tool_name} ok ({len(envelope.text)} chars){_RESET}")
    return envelope.text


def build_server(
    settings: Optional[Settings] = None,
    client_factory: Optional[ClientFactory] = None,
) -> FastMCP:
    """Create a FastMCP server with all three tools registered.

    Args:
        settings: Endpoints to call.  Defaults to load_settings().
        client_factory: Supplies the httpx.AsyncClient for each call; tests
            pass one backed by httpx.MockTransport.
    """
    settings = settings or load_settings()

    fetcher = content_fetch_translator(settings.reader_url, client_factory)
    searcher = search_translator(settings.search_url, client_factory)
    flights = flight_search_translator(settings.flights_url, client_factory)

    mcp = FastMCP("rjina")

    # =========================================================================
    # TOOL 1: fetch_url_content
    # =========================================================================
    @mcp.tool(name="fetch_url_content")
    async def fetch_url_content(
        url: Annotated[AbsoluteUrl, Field(description="The URL of the webpage to fetch content from.")],
        api_key: Annotated[Optional[str], Field(
            description="Optional Jina Reader API key for higher rate limits.")] = None,
        generate_image_alt: Annotated[Optional[bool], Field(
            description="Generate alt text for images using a VLM (X-With-Generated-Alt: true).")] = None,
        cookies: Annotated[Optional[str], Field(
            description="Cookie string to forward with the request (X-Set-Cookie).")] = None,
        output_format: Annotated[Optional[OutputFormat], Field(
            description="Desired output format (X-Respond-With). 'screenshot' returns a URL to the image.")] = None,
        proxy_url: Annotated[Optional[AbsoluteUrl], Field(
            description="URL of a proxy server to use for the request (X-Proxy-Url).")] = None,
        cache_tolerance: Annotated[Optional[NonNegativeInt], Field(
            description="Cache tolerance in seconds. 0 means no cache (X-Cache-Tolerance).")] = None,
        no_cache: Annotated[Optional[bool], Field(
            description="Bypass the cache (X-No-Cache: true).")] = None,
        target_selector: Annotated[Optional[str], Field(
            description="CSS selector for the part of the page to return (X-Target-Selector).")] = None,
        wait_for_selector: Annotated[Optional[str], Field(
            description="CSS selector to wait for before returning content (X-Wait-For-Selector).")] = None,
        timeout: Annotated[Optional[NonNegativeInt], Field(
            description="Maximum page load wait time in seconds (X-Timeout).")] = None,
        json_output: Annotated[Optional[bool], Field(
            description="Ask for JSON output (Accept: application/json). The content will be a JSON string.")] = None,
        use_post_for_url: Annotated[Optional[bool], Field(
            description="Send the URL in a POST body (needed for URLs with # fragments).")] = None,
    ) -> str:
        """Fetch a web page's content through the Jina Reader API (r.jina.ai).

        Returns the page as markdown by default, or as html, plain text, or a
        screenshot URL.  Supports image alt-text generation, cookie
        forwarding, a proxy, cache control, CSS selectors, a load timeout,
        JSON output, and POSTing the URL for links with a #fragment.
        """
        request = FetchRequest(
            url=url,
            api_key=api_key,
            generate_image_alt=generate_image_alt,
            cookies=cookies,
            output_format=output_format,
            proxy_url=proxy_url,
            cache_tolerance=cache_tolerance,
            no_cache=no_cache,
            target_selector=target_selector,
            wait_for_selector=wait_for_selector,
            timeout=timeout,
            json_output=json_output,
            use_post_for_url=use_post_for_url,
        )
        _log_request("fetch_url_content", **vars(request))
        return _respond("fetch_url_content", await fetcher.invoke(request))

    # =========================================================================
    # TOOL 2: search
    # =========================================================================
    @mcp.tool(name="search")
    async def search(
        q: Annotated[str, Field(description="The search query string.")],
        api_key: Annotated[str, Field(description="Jina API key for authentication.")],
        type: Annotated[SearchType, Field(description="Type of search results to return.")] = "web",
        provider: Annotated[Optional[SearchProvider], Field(
            description="Search provider to use.")] = None,
        count: Annotated[Optional[ResultCount], Field(
            description="Number of results to return (max 20).")] = None,
        num: Annotated[Optional[ResultCount], Field(
            description="Alternative to count: number of results to return (max 20).")] = None,
        gl: Annotated[Optional[str], Field(description="Two-letter country code.")] = None,
        hl: Annotated[Optional[str], Field(description="Interface language code (e.g. 'en').")] = None,
        location: Annotated[Optional[str], Field(
            description="Location string for local search results.")] = None,
        page: Annotated[Optional[int], Field(description="Page number for paginated results.")] = None,
        fallback: Annotated[bool, Field(
            description="Whether to use fallback options if the primary search fails.")] = True,
        nfpr: Annotated[Optional[bool], Field(
            description="No Foreign Page Results: only show pages in the specified language.")] = None,
        ext: Annotated[Optional[list[str]], Field(
            description="File extensions to filter results by.")] = None,
        filetype: Annotated[Optional[list[str]], Field(
            description="File types to filter results by.")] = None,
        intitle: Annotated[Optional[list[str]], Field(
            description="Terms that must appear in the page title.")] = None,
        site: Annotated[Optional[list[str]], Field(
            description="Limit results to specific websites.")] = None,
        loc: Annotated[Optional[list[str]], Field(
            description="Language codes to filter results by.")] = None,
        output_format: Annotated[Optional[SearchOutputFormat], Field(
            description="Response format (application/json or text/plain).")] = None,
        no_cache: Annotated[Optional[bool], Field(description="Bypass cache for fresh results.")] = None,
        cache_tolerance: Annotated[Optional[NonNegativeInt], Field(
            description="Cache tolerance in seconds.")] = None,
    ) -> str:
        """Search the web through the Jina Search API (s.jina.ai).

        Supports web, image and news results, a choice of provider (Google or
        Bing), locale and location, pagination, and search operators
        (file extension/type, title terms, site, language).
        """
        request = SearchRequest(
            q=q,
            api_key=api_key,
            type=type,
            provider=provider,
            count=count,
            num=num,
            gl=gl,
            hl=hl,
            location=location,
            page=page,
            fallback=fallback,
            nfpr=nfpr,
            ext=tuple(ext or ()),
            filetype=tuple(filetype or ()),
            intitle=tuple(intitle or ()),
            site=tuple(site or ()),
            loc=tuple(loc or ()),
            output_format=output_format,
            no_cache=no_cache,
            cache_tolerance=cache_tolerance,
        )
        _log_request("search", **vars(request))
        return _respond("search", await searcher.invoke(request))

    # =========================================================================
    # TOOL 3: searchGoogleFlights
    # =========================================================================
    # The only tool with cross-field rules.  They are checked inside the
    # translator, after FastMCP has validated each field on its own.
    # =========================================================================
    @mcp.tool(name="searchGoogleFlights")
    async def search_google_flights(
        api_key: Annotated[str, Field(description="Your SerpApi private key.")],
        departure_id: Annotated[Optional[str], Field(
            description="Departure airport code(s) or location kgmid(s), comma-separated (e.g. 'AUS', 'CDG,ORY').")] = None,
        arrival_id: Annotated[Optional[str], Field(
            description="Arrival airport code(s) or location kgmid(s), comma-separated (e.g. 'LHR', '/m/04jpl').")] = None,
        gl: Annotated[Optional[str], Field(description="Country for the search (e.g. 'us', 'uk').")] = None,
        hl: Annotated[Optional[str], Field(description="Language for the search (e.g. 'en', 'es').")] = None,
        currency: Annotated[Optional[str], Field(
            description="Currency for returned prices (e.g. 'USD', 'EUR').")] = None,
        flight_type: Annotated[Optional[FlightType], Field(
            description="'1' Round trip (default), '2' One way, '3' Multi-city (use multi_city_json).")] = None,
        outbound_date: Annotated[Optional[IsoDate], Field(
            description="Outbound date, YYYY-MM-DD.")] = None,
        return_date: Annotated[Optional[IsoDate], Field(
            description="Return date, YYYY-MM-DD. Required when flight_type is '1'.")] = None,
        travel_class: Annotated[Optional[TravelClass], Field(
            description="'1' Economy (default), '2' Premium economy, '3' Business, '4' First.")] = None,
        multi_city_json: Annotated[Optional[str], Field(
            description='JSON list of legs, e.g. \'[{"departure_id":"CDG","arrival_id":"NRT","date":"2025-05-25"}]\'. '
                        "Required when flight_type is '3'.")] = None,
        show_hidden: Annotated[Optional[bool], Field(description="Include hidden flight results.")] = None,
        deep_search: Annotated[Optional[bool], Field(
            description="Deep search: more precise results, longer response time.")] = None,
        adults: Annotated[Optional[NonNegativeInt], Field(description="Number of adults.")] = None,
        children: Annotated[Optional[NonNegativeInt], Field(description="Number of children.")] = None,
        infants_in_seat: Annotated[Optional[NonNegativeInt], Field(
            description="Number of infants in seat.")] = None,
        infants_on_lap: Annotated[Optional[NonNegativeInt], Field(
            description="Number of infants on lap.")] = None,
        sort_by: Annotated[Optional[SortBy], Field(
            description="'1' Top flights, '2' Price, '3' Departure time, '4' Arrival time, "
                        "'5' Duration, '6' Emissions.")] = None,
        stops: Annotated[Optional[Stops], Field(
            description="'0' Any, '1' Nonstop only, '2' 1 stop or fewer, '3' 2 stops or fewer.")] = None,
        exclude_airlines: Annotated[Optional[str], Field(
            description="Comma-separated airline codes/alliances to exclude. Cannot be used with include_airlines.")] = None,
        include_airlines: Annotated[Optional[str], Field(
            description="Comma-separated airline codes/alliances to include. Cannot be used with exclude_airlines.")] = None,
        bags: Annotated[Optional[NonNegativeInt], Field(description="Number of carry-on bags.")] = None,
        max_price: Annotated[Optional[NonNegativeInt], Field(description="Maximum ticket price.")] = None,
        outbound_times: Annotated[Optional[str], Field(
            description="Outbound times range, e.g. '4,18' or '4,18,3,19' (departure and arrival).")] = None,
        return_times: Annotated[Optional[str], Field(
            description="Return times range, same format as outbound_times.")] = None,
        emissions: Annotated[Optional[Emissions], Field(description="'1' for less emissions only.")] = None,
        layover_duration: Annotated[Optional[str], Field(
            description="Layover duration range in minutes, 'min,max' (e.g. '90,330').")] = None,
        exclude_conns: Annotated[Optional[str], Field(
            description="Comma-separated connecting airport codes to exclude.")] = None,
        max_duration: Annotated[Optional[NonNegativeInt], Field(
            description="Maximum flight duration in minutes.")] = None,
        departure_token: Annotated[Optional[str], Field(
            description="Token for the returning/next-leg flights of a selected flight. "
                        "Cannot be used with booking_token.")] = None,
        booking_token: Annotated[Optional[str], Field(
            description="Token for the booking options of selected flights. "
                        "Cannot be used with departure_token.")] = None,
        no_cache: Annotated[Optional[bool], Field(
            description="Force fresh results, ignoring SerpApi's cache. Cannot be used with async_search.")] = None,
        async_search: Annotated[Optional[bool], Field(
            description="Submit the search asynchronously (sent as 'async'). Cannot be used with no_cache.")] = None,
        zero_trace: Annotated[Optional[bool], Field(
            description="Enterprise only: SerpApi skips storing search parameters and metadata.")] = None,
    ) -> str:
        """Search for flights with the SerpApi Google Flights API.

        Query by departure/arrival airports, dates, passengers and travel
        class, with filters for stops, airlines, bags, price, times,
        emissions, layovers and duration.  Use departure_token or
        booking_token from a previous result to continue a search.
        Returns SerpApi's JSON response.  Requires a SerpApi API key.
        """
        request = FlightSearchRequest(
            api_key=api_key,
            departure_id=departure_id,
            arrival_id=arrival_id,
            gl=gl,
            hl=hl,
            currency=currency,
            flight_type=flight_type,
            outbound_date=outbound_date,
            return_date=return_date,
            travel_class=travel_class,
            multi_city_json=multi_city_json,
            show_hidden=show_hidden,
            deep_search=deep_search,
            adults=adults,
            children=children,
            infants_in_seat=infants_in_seat,
            infants_on_lap=infants_on_lap,
            sort_by=sort_by,
            stops=stops,
            exclude_airlines=exclude_airlines,
            include_airlines=include_airlines,
            bags=bags,
            max_price=max_price,
            outbound_times=outbound_times,
            return_times=return_times,
            emissions=emissions,
            layover_duration=layover_duration,
            exclude_conns=exclude_conns,
            max_duration=max_duration,
            departure_token=departure_token,
            booking_token=booking_token,
            no_cache=no_cache,
            async_search=async_search,
            zero_trace=zero_trace,
        )
        _log_request("searchGoogleFlights", **vars(request))
        return _respond("searchGoogleFlights", await flights.invoke(request))

    return mcp


mcp = build_server(settings)


def run(transport: Optional[Literal["stdio", "http"]] = None) -> None:
    """Serve `mcp` over stdio, or streamable HTTP at host:port/path."""
    transport = transport or settings.transport
    if transport == "http":
        logger.info(f"Serving on http://{settings.host}:{settings.port}{settings.path}")
        mcp.run(transport="http", host=settings.host, port=settings.port, path=settings.path)
    else:
        mcp.run()


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    run()
