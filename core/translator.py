# =============================================================================
# core/translator.py  -  The generic tool translator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   All three tools follow the same four steps:
#
#     params ──▶ validate ──▶ build request ──▶ send ──▶ translate response
#
#   Translator runs those steps once, for any tool.  What differs per tool
#   is pure configuration, supplied by core/content_fetch.py,
#   core/search.py and core/flight_search.py:
#     - a rule list (cross-field validation; empty for fetch and search)
#     - a build function, usually driven by a HeaderField/QueryField table
#     - the endpoint the build function targets
#     - how a 2xx body becomes text (verbatim, or pretty-printed JSON)
#     - the wording of the upstream/transport error messages
#
# FAILURE HANDLING:
#   invoke() never raises for a failed call.  Validation, upstream and
#   transport failures (including header values the HTTP client cannot
#   encode) are each caught here and rendered with the tool's
#   message template.  asyncio cancellation is NOT caught: it propagates,
#   and the `async with` around the client closes the connection.
#
# NO STATE:
#   A Translator is frozen and holds no client.  Each invocation opens its
#   own AsyncClient (or asks client_factory for one), so concurrent calls
#   never share anything.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

import httpx

from core.errors import TransportError, UpstreamError, ValidationError
from core.models import HttpRequestPlan, ToolEnvelope
from core.validation import Rule, enforce

logger = logging.getLogger(__name__)

P = TypeVar("P")

ClientFactory = Callable[[], httpx.AsyncClient]


def stringify(value: Any) -> str:
    """Render a parameter the way the upstream APIs expect it.

    Booleans become lowercase "true"/"false"; numbers use str().
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# -----------------------------------------------------------------------------
# Mapping tables
# -----------------------------------------------------------------------------
# A HeaderField or QueryField says "attribute X of the record goes to
# header/parameter Y".  A field that is None (or a flag that is not True,
# for headers) contributes nothing.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class HeaderField:
    attr: str
    header: str
    value: Optional[str] = None   # Fixed header value to send instead of the field's

    def apply(self, record: Any, headers: dict[str, str]) -> None:
        raw = getattr(record, self.attr)
        if raw is None or raw is False:
            return
        headers[self.header] = self.value if self.value is not None else stringify(raw)


@dataclass(frozen=True)
class QueryField:
    attr: str
    key: Optional[str] = None     # Defaults to the attribute name
    repeated: bool = False

    def apply(self, record: Any, params: list[tuple[str, str]]) -> None:
        raw = getattr(record, self.attr)
        if raw is None:
            return
        key = self.key or self.attr
        if self.repeated:
            params.extend((key, stringify(item)) for item in raw)
        else:
            params.append((key, stringify(raw)))


def build_headers(record: Any, table: Sequence[HeaderField]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for entry in table:
        entry.apply(record, headers)
    return headers


def build_params(record: Any, table: Sequence[QueryField]) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    for entry in table:
        entry.apply(record, params)
    return params


def bearer(api_key: Optional[str]) -> dict[str, str]:
    """Authorization header for a caller-supplied key, if any."""
    return {"Authorization": f"Bearer {api_key}"} if api_key else {}


# -----------------------------------------------------------------------------
# Response renderers
# -----------------------------------------------------------------------------
def verbatim(response: httpx.Response) -> str:
    return response.text


# -----------------------------------------------------------------------------
# Sending
# -----------------------------------------------------------------------------
def _default_client() -> httpx.AsyncClient:
    # No timeout here: the only timeout is the one the caller asks the
    # upstream to honour.
    return httpx.AsyncClient(timeout=None)


async def send(plan: HttpRequestPlan, client_factory: Optional[ClientFactory] = None) -> httpx.Response:
    """Issue exactly one HTTP request for `plan`.

    Raises:
        TransportError: the request did not complete, or could not be
            encoded (e.g. a non-ASCII header value).
    """
    factory = client_factory or _default_client
    try:
        async with factory() as client:
            return await client.request(
                plan.method,
                plan.url,
                headers=plan.headers,
                params=plan.params or None,
                data=plan.form,
            )
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
        raise TransportError(str(exc) or type(exc).__name__) from exc


# -----------------------------------------------------------------------------
# Translator
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Translator(Generic[P]):
    """One tool: rules + request builder + response renderer.

    Attributes:
        name: Tool name, used in log lines.
        endpoint: Base URL handed to `build`.
        build: Maps a validated record to an HttpRequestPlan.
        upstream_message: Template for non-2xx responses; receives
            {status}, {reason} and {body}.
        transport_message: Template for failed requests; receives {error}.
        validation_message: Template for rule violations; receives {errors}.
        rules: Cross-field rules checked before `build`.
        render: Turns a 2xx response into the result text.
        client_factory: Supplies the AsyncClient; tests inject a
            MockTransport-backed client here.
    """

    name: str
    endpoint: str
    build: Callable[[P, str], HttpRequestPlan]
    upstream_message: str
    transport_message: str
    validation_message: str = "Input validation error: {errors}"
    rules: tuple[Rule, ...] = ()
    render: Callable[[httpx.Response], str] = verbatim
    client_factory: Optional[ClientFactory] = None

    def plan(self, params: P) -> HttpRequestPlan:
        """Validate `params` and build the request, without sending it."""
        enforce(params, self.rules)
        return self.build(params, self.endpoint)

    async def execute(self, params: P) -> str:
        """Validate, send, and render; raise on any failure."""
        plan = self.plan(params)
        response = await send(plan, self.client_factory)
        if not response.is_success:
            logger.warning("%s upstream error (%s)", self.name, response.status_code)
            raise UpstreamError(response.status_code, response.reason_phrase, response.text)
        try:
            return self.render(response)
        except ValueError as exc:
            raise TransportError(str(exc)) from exc

    async def invoke(self, params: P) -> ToolEnvelope:
        """Run the tool and wrap the outcome in a ToolEnvelope."""
        try:
            return ToolEnvelope.ok(await self.execute(params))
        except ValidationError as exc:
            return ToolEnvelope.error(self.validation_message.format(errors=exc))
        except UpstreamError as exc:
            return ToolEnvelope.error(self.upstream_message.format(
                status=exc.status_code, reason=exc.reason, body=exc.body,
            ))
        except TransportError as exc:
            logger.error("%s transport error: %s", self.name, exc.description)
            return ToolEnvelope.error(self.transport_message.format(error=exc.description))
