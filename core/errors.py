# =============================================================================
# core/errors.py  -  The three ways a tool call can fail
# =============================================================================
#
#   ValidationError  - the parameters were rejected before any request was
#                      built.  Carries every violation, not just the first.
#   UpstreamError    - the request completed but the API answered non-2xx.
#   TransportError   - the request never completed (DNS, refused connection,
#                      reset, unreadable body).
#
# These are raised inside core/translator.py and caught at the tool
# boundary, where each tool's message templates turn them into an
# error-flagged ToolEnvelope.  None of them ever reaches the MCP transport
# as an uncaught exception.
# =============================================================================

from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    """One failed cross-field rule."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ToolCallError(Exception):
    """Base class for failures converted into error envelopes."""


class ValidationError(ToolCallError):
    def __init__(self, violations: list[Violation]) -> None:
        self.violations = list(violations)
        super().__init__(", ".join(str(v) for v in self.violations))


class UpstreamError(ToolCallError):
    def __init__(self, status_code: int, reason: str, body: str) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"{status_code} {reason}")


class TransportError(ToolCallError):
    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(description)
