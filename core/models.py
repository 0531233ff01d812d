# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows through a tool call:
#
#   FetchRequest / SearchRequest / FlightSearchRequest
#       The parameter record for one invocation of each tool.  Frozen: a
#       record is built once from the tool arguments and never mutated, so
#       validation rules and request builders can read it freely.
#
#   HttpRequestPlan
#       What the request builders produce: method, URL, headers, and the
#       query/body encoding.  It is plain data, so tests can assert on the
#       exact request without touching the network.
#
#   ToolEnvelope
#       The uniform result every tool returns: exactly one "text" item plus
#       an error flag.
#
# "None" MEANS ABSENT:
#   Every optional field defaults to None.  The request builders treat None
#   as "the caller did not send this" and never turn it into a header, a
#   query parameter, or an empty string.
# =============================================================================

from dataclasses import dataclass, field
from typing import Literal, Optional


OutputFormat = Literal["markdown", "html", "text", "screenshot"]
SearchType = Literal["web", "images", "news"]
SearchProvider = Literal["google", "bing"]
SearchOutputFormat = Literal["json", "text"]

# SerpApi takes its enums as numeric strings.
FlightType = Literal["1", "2", "3"]            # round trip, one way, multi-city
TravelClass = Literal["1", "2", "3", "4"]      # economy, premium, business, first
SortBy = Literal["1", "2", "3", "4", "5", "6"]
Stops = Literal["0", "1", "2", "3"]
Emissions = Literal["1"]


# -----------------------------------------------------------------------------
# FetchRequest - one call to the content reader (r.jina.ai)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FetchRequest:
    """Parameters for fetching one page through the reader API.

    Every optional field maps to exactly one upstream header; the flags are
    independent of each other.
    """

    url: str                                        # Absolute URL of the page
    api_key: Optional[str] = None                   # -> Authorization: Bearer
    generate_image_alt: Optional[bool] = None       # -> X-With-Generated-Alt
    cookies: Optional[str] = None                   # -> X-Set-Cookie
    output_format: Optional[OutputFormat] = None    # -> X-Respond-With
    proxy_url: Optional[str] = None                 # -> X-Proxy-Url
    cache_tolerance: Optional[int] = None           # -> X-Cache-Tolerance (seconds)
    no_cache: Optional[bool] = None                 # -> X-No-Cache
    target_selector: Optional[str] = None           # -> X-Target-Selector
    wait_for_selector: Optional[str] = None         # -> X-Wait-For-Selector
    timeout: Optional[int] = None                   # -> X-Timeout (seconds)
    json_output: Optional[bool] = None              # -> Accept: application/json
    use_post_for_url: Optional[bool] = None         # POST the URL as a form field
    # use_post_for_url exists for URLs with a "#fragment": the fragment would
    # be dropped if the URL were concatenated onto the reader's path.


# -----------------------------------------------------------------------------
# SearchRequest - one call to the search API (s.jina.ai)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SearchRequest:
    """Parameters for one web search."""

    q: str
    api_key: str                                    # Required for search
    type: SearchType = "web"
    provider: Optional[SearchProvider] = None
    count: Optional[int] = None                     # 0-20
    num: Optional[int] = None                       # 0-20, alternate name for count
    gl: Optional[str] = None                        # Country code
    hl: Optional[str] = None                        # Interface language
    location: Optional[str] = None
    page: Optional[int] = None
    fallback: bool = True
    nfpr: Optional[bool] = None                     # No foreign page results
    ext: tuple[str, ...] = field(default_factory=tuple)
    filetype: tuple[str, ...] = field(default_factory=tuple)
    intitle: tuple[str, ...] = field(default_factory=tuple)
    site: tuple[str, ...] = field(default_factory=tuple)
    loc: tuple[str, ...] = field(default_factory=tuple)
    output_format: Optional[SearchOutputFormat] = None
    no_cache: Optional[bool] = None
    cache_tolerance: Optional[int] = None


# -----------------------------------------------------------------------------
# FlightSearchRequest - one call to SerpApi's Google Flights engine
# -----------------------------------------------------------------------------
# Field names are SerpApi's own query parameter names, except for the two
# that would shadow Python builtins/keywords: flight_type (sent as "type")
# and async_search (sent as "async").  The declaration order is the order
# the parameters appear in the query string.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FlightSearchRequest:
    """Parameters for a Google Flights search through SerpApi."""

    api_key: str

    # --- Where and when ---
    departure_id: Optional[str] = None              # "AUS", "CDG,ORY", "/m/0vzm"
    arrival_id: Optional[str] = None
    gl: Optional[str] = None
    hl: Optional[str] = None
    currency: Optional[str] = None
    flight_type: Optional[FlightType] = None
    outbound_date: Optional[str] = None             # YYYY-MM-DD
    return_date: Optional[str] = None               # YYYY-MM-DD
    travel_class: Optional[TravelClass] = None
    multi_city_json: Optional[str] = None           # JSON list of legs
    show_hidden: Optional[bool] = None
    deep_search: Optional[bool] = None

    # --- Passengers ---
    adults: Optional[int] = None
    children: Optional[int] = None
    infants_in_seat: Optional[int] = None
    infants_on_lap: Optional[int] = None

    # --- Filters ---
    sort_by: Optional[SortBy] = None
    stops: Optional[Stops] = None
    exclude_airlines: Optional[str] = None
    include_airlines: Optional[str] = None
    bags: Optional[int] = None
    max_price: Optional[int] = None
    outbound_times: Optional[str] = None
    return_times: Optional[str] = None
    emissions: Optional[Emissions] = None
    layover_duration: Optional[str] = None          # "min,max" in minutes
    exclude_conns: Optional[str] = None
    max_duration: Optional[int] = None              # Minutes

    # --- Pagination tokens ---
    departure_token: Optional[str] = None
    booking_token: Optional[str] = None

    # --- SerpApi request controls ---
    no_cache: Optional[bool] = None
    async_search: Optional[bool] = None
    zero_trace: Optional[bool] = None


# -----------------------------------------------------------------------------
# HttpRequestPlan - the output of a request builder
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class HttpRequestPlan:
    """A fully resolved outbound HTTP request."""

    method: Literal["GET", "POST"]
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: list[tuple[str, str]] = field(default_factory=list)
    form: Optional[dict[str, str]] = None
    # params is a list of pairs, not a dict: search filters repeat the same
    # key once per value, in order.


# -----------------------------------------------------------------------------
# ToolEnvelope - what every tool hands back to the caller
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextContent:
    """A single text content item."""

    text: str
    type: Literal["text"] = "text"


@dataclass(frozen=True)
class ToolEnvelope:
    """Uniform success/error wrapper returned by every tool invocation."""

    content: tuple[TextContent, ...]
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolEnvelope":
        return cls(content=(TextContent(text=text),))

    @classmethod
    def error(cls, text: str) -> "ToolEnvelope":
        return cls(content=(TextContent(text=text),), is_error=True)

    @property
    def text(self) -> str:
        """The text of the single content item."""
        return self.content[0].text
