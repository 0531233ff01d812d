# =============================================================================
# core/search.py  -  search: query -> results via Jina Search
# =============================================================================
#
# Unlike the reader, search takes its options as query parameters.  Only
# three concerns stay in headers: the API key, Accept, and the two cache
# controls.
#
# QUERY RULES (see SEARCH_QUERY):
#   - q and type are always sent (type defaults to "web").
#   - count and num are two names for the same thing.  Both are sent when
#     both are given; the search API decides what that means.
#   - fallback has a default, so it is always sent as "true"/"false".
#   - nfpr has no default and is only sent when given.
#   - ext / filetype / intitle / site / loc repeat their key once per
#     element, in the order given.
# =============================================================================

from typing import Optional

from core.models import HttpRequestPlan, SearchRequest
from core.translator import (
    ClientFactory,
    HeaderField,
    QueryField,
    Translator,
    bearer,
    build_headers,
    build_params,
)

SEARCH_URL = "https://s.jina.ai/search"

ACCEPT_BY_FORMAT = {
    "json": "application/json",
    "text": "text/plain",
}

SEARCH_HEADERS = (
    HeaderField("no_cache", "X-No-Cache"),
    HeaderField("cache_tolerance", "X-Cache-Tolerance"),
)

SEARCH_QUERY = (
    QueryField("q"),
    QueryField("type"),
    QueryField("provider"),
    QueryField("count"),
    QueryField("num"),
    QueryField("gl"),
    QueryField("hl"),
    QueryField("location"),
    QueryField("page"),
    QueryField("fallback"),
    QueryField("nfpr"),
    QueryField("ext", repeated=True),
    QueryField("filetype", repeated=True),
    QueryField("intitle", repeated=True),
    QueryField("site", repeated=True),
    QueryField("loc", repeated=True),
)


def build_search_request(params: SearchRequest, endpoint: str) -> HttpRequestPlan:
    headers = bearer(params.api_key)
    if params.output_format is not None:
        headers["Accept"] = ACCEPT_BY_FORMAT[params.output_format]
    headers.update(build_headers(params, SEARCH_HEADERS))
    return HttpRequestPlan(method="GET", url=endpoint, headers=headers,
                           params=build_params(params, SEARCH_QUERY))


def search_translator(
    endpoint: str = SEARCH_URL,
    client_factory: Optional[ClientFactory] = None,
) -> Translator[SearchRequest]:
    return Translator(
        name="search",
        endpoint=endpoint,
        build=build_search_request,
        upstream_message="Error performing search: {status} {reason}. {body}",
        transport_message="Network error during search: {error}",
        client_factory=client_factory,
    )
