# =============================================================================
# core/schema.py  -  Reusable parameter types for the tool signatures
# =============================================================================
#
# The tool functions in tools/mcp_server.py declare their parameters with
# these annotated types.  FastMCP turns the signature into the tool's JSON
# schema and pydantic enforces the constraints before the tool body runs,
# so a malformed call never gets as far as building a request.
# =============================================================================

from typing import Annotated

from pydantic import AfterValidator, AnyUrl, Field, TypeAdapter

_URL_ADAPTER = TypeAdapter(AnyUrl)


def require_absolute_url(value: str) -> str:
    """Accept only absolute URLs, returning the caller's string untouched.

    The string is kept as typed (pydantic's Url would normalize it, e.g.
    add a trailing slash) because the reader appends it to its own path.
    """
    _URL_ADAPTER.validate_python(value)
    return value


AbsoluteUrl = Annotated[str, AfterValidator(require_absolute_url)]

IsoDate = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]

NonNegativeInt = Annotated[int, Field(ge=0)]

ResultCount = Annotated[int, Field(ge=0, le=20)]
