# =============================================================================
# core/content_fetch.py  -  fetch_url_content: page -> text via Jina Reader
# =============================================================================
#
# The reader is driven entirely by headers.  Each optional FetchRequest
# field maps to one header (see FETCH_HEADERS); nothing is merged and no
# default is ever sent for a field the caller left out.
#
# GET vs POST:
#   GET  <base><url>   the target URL is appended to the reader's path as-is
#                      (not query-encoded).
#   POST <base>        form body url=<url>.  Used when use_post_for_url is
#                      set, because a "#fragment" cannot survive the GET
#                      path concatenation.
#
# The response body is returned verbatim, whatever format was asked for.
# json_output only changes the Accept header.
# =============================================================================

from typing import Optional

from core.models import FetchRequest, HttpRequestPlan
from core.translator import ClientFactory, HeaderField, Translator, bearer, build_headers

READER_URL = "https://r.jina.ai/"

FETCH_HEADERS = (
    HeaderField("generate_image_alt", "X-With-Generated-Alt"),
    HeaderField("cookies", "X-Set-Cookie"),
    HeaderField("output_format", "X-Respond-With"),
    HeaderField("proxy_url", "X-Proxy-Url"),
    HeaderField("cache_tolerance", "X-Cache-Tolerance"),
    HeaderField("no_cache", "X-No-Cache"),
    HeaderField("target_selector", "X-Target-Selector"),
    HeaderField("wait_for_selector", "X-Wait-For-Selector"),
    HeaderField("timeout", "X-Timeout"),
    HeaderField("json_output", "Accept", value="application/json"),
)


def build_fetch_request(params: FetchRequest, endpoint: str) -> HttpRequestPlan:
    headers = bearer(params.api_key)
    headers.update(build_headers(params, FETCH_HEADERS))

    if params.use_post_for_url:
        headers["Content-Type"] = "application/x-www-form-urlencoded"
        return HttpRequestPlan(method="POST", url=endpoint, headers=headers,
                               form={"url": params.url})

    return HttpRequestPlan(method="GET", url=f"{endpoint}{params.url}", headers=headers)


def content_fetch_translator(
    endpoint: str = READER_URL,
    client_factory: Optional[ClientFactory] = None,
) -> Translator[FetchRequest]:
    return Translator(
        name="fetch_url_content",
        endpoint=endpoint,
        build=build_fetch_request,
        upstream_message="Error fetching URL: {status} {reason}. {body}",
        transport_message="Network error fetching URL: {error}",
        client_factory=client_factory,
    )
