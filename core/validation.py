# =============================================================================
# core/validation.py  -  Cross-field rules
# =============================================================================
#
# Per-field checks (types, ranges, enums, date patterns) happen at the tool
# boundary, where pydantic validates the arguments against the tool
# signature.  What is left for this module is the rules that span more than
# one field: two parameters that cannot be combined, or a parameter that
# becomes required because of another one's value.
#
# A Rule is a pure predicate over a frozen request record.  Rules do not
# know about each other; check_rules() evaluates ALL of them and returns
# every violation, so the caller sees the full list in one round-trip
# instead of fixing one error at a time.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from core.errors import ValidationError, Violation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A named constraint: `holds(record)` must be True."""

    path: str
    message: str
    holds: Callable[[Any], bool]

    def check(self, record: Any) -> Violation | None:
        if self.holds(record):
            return None
        return Violation(path=self.path, message=self.message)


def is_set(value: Any) -> bool:
    """True when a parameter counts as given.

    None and empty strings are "not given"; for flags, only True counts
    (False is what SerpApi assumes anyway).
    """
    if value is None or value is False:
        return False
    if isinstance(value, str) and not value:
        return False
    return True


def mutually_exclusive(first: str, second: str) -> Rule:
    """`first` and `second` cannot both be set.  Reported on `first`."""
    return Rule(
        path=first,
        message=f"{first} and {second} cannot be used together.",
        holds=lambda r: not (is_set(getattr(r, first)) and is_set(getattr(r, second))),
    )


def required_when(required: str, field_name: str, value: Any, message: str) -> Rule:
    """`required` must be present when `field_name == value`."""
    return Rule(
        path=required,
        message=message,
        holds=lambda r: getattr(r, field_name) != value or getattr(r, required) is not None,
    )


def check_rules(record: Any, rules: Sequence[Rule]) -> list[Violation]:
    """Evaluate every rule and collect the violations, in rule order."""
    return [v for v in (rule.check(record) for rule in rules) if v is not None]


def enforce(record: Any, rules: Sequence[Rule]) -> None:
    """Raise ValidationError listing every violated rule."""
    violations = check_rules(record, rules)
    if violations:
        logger.warning("Rejected %s: %s", type(record).__name__,
                       ", ".join(v.path for v in violations))
        raise ValidationError(violations)
