"""Exception hierarchy and structured error payloads.

Arithmetic on :class:`~attospan.Duration` fails fast: a value that
cannot be represented exactly raises instead of wrapping silently.
Errors propagate to the caller; only the command-line front end
catches them and converts them into an :class:`ErrorPayload`.

Hierarchy::

    AttospanError
    ├── DurationOverflowError   (also an OverflowError)
    └── CancellationError

Division by zero uses the builtin :class:`ZeroDivisionError` and bad
float inputs the builtin :class:`ValueError`, so callers can rely on
the usual Python contracts.

Payload schema::

    {
        "error_type": "overflow",
        "message": "Human-readable error description",
        "timestamp": "2026-02-14T12:34:56+00:00",
        "details": {}
    }
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AttospanError(Exception):
    """Base class for all errors raised by attospan."""


class DurationOverflowError(AttospanError, OverflowError):
    """A component, operand or result is outside its representable range.

    Raised for whole seconds or attoseconds outside a signed 64-bit
    integer, multipliers and divisors outside 64 bits, and products or
    quotients that do not fit the signed 128-bit attosecond count.
    """


class CancellationError(AttospanError):
    """Raised by :meth:`Canceller.check_cancellation` once cancelled."""


DEFAULT_ERROR_TYPES: dict[type[Exception], str] = {
    DurationOverflowError: "overflow",
    CancellationError: "cancelled",
    ZeroDivisionError: "division_by_zero",
    ValueError: "invalid_value",
}
"""Exact-class mapping used by the CLI when none is supplied."""

# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Machine-readable report of one failed command."""

    error_type: str
    message: str
    timestamp: str
    details: dict[str, object] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(asdict(self))


# ---------------------------------------------------------------------------
# Payload builder
# ---------------------------------------------------------------------------


def build_error_payload(
    error: Exception,
    *,
    error_type_map: dict[type[Exception], str] | None = None,
    details: dict[str, object] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ErrorPayload:
    """Describe *error* as an :class:`ErrorPayload`.

    ``error_type`` comes from *error_type_map* (default
    :data:`DEFAULT_ERROR_TYPES`), keyed on ``type(error)`` itself, so a
    subclass of a mapped exception reports ``"error"`` unless it is
    mapped too.  The timestamp is taken from *clock*, or the current
    UTC time.
    """
    type_map = DEFAULT_ERROR_TYPES if error_type_map is None else error_type_map
    reported_at = datetime.now(UTC) if clock is None else clock()
    return ErrorPayload(
        error_type=type_map.get(type(error), "error"),
        message=str(error),
        timestamp=reported_at.isoformat(),
        details=dict(details) if details else {},
    )
