"""Fixed-precision signed duration value type.

:class:`Duration` counts attoseconds (10⁻¹⁸ s) in a 128-bit
two's-complement integer stored as two words, ``high`` (signed) and
``low`` (unsigned).  All arithmetic is delegated to the word kernel in
:mod:`attospan._int128`; this module adds the value-object surface:
named unit constructors, Python operators, the ``components`` view and
:class:`datetime.timedelta` interop.

**Exact vs approximate:**

- Construction from ``int`` values, ``+``, ``-``, ``*`` and ``/`` by an
  integer are exact (``/`` truncates toward zero).
- ``float`` inputs are converted from their exact binary value and
  truncated toward zero to whole attoseconds.
- ``Duration / Duration`` and :meth:`Duration.total_seconds` are double
  precision approximations by contract.

Usage::

    timeout = Duration.seconds(1) + Duration.milliseconds(500)
    assert timeout == Duration.milliseconds(1500)
    timeout.components          # (1, 500000000000000000)
    timeout / Duration.seconds(3)  # 0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from fractions import Fraction
from numbers import Integral, Real
from typing import ClassVar, Self

from attospan import _int128
from attospan._errors import DurationOverflowError

# ---------------------------------------------------------------------------
# Unit scales (attoseconds per unit)
# ---------------------------------------------------------------------------

_NANOSECOND = 10**9
_MICROSECOND = 10**12
_MILLISECOND = 10**15
_SECOND = _int128.ATTOS_PER_SECOND
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY

_SECONDS_PER_DAY = 86_400


def _scaled_attoseconds(value: int | float, attos_per_unit: int) -> int:
    """Exact attosecond count of *value* units, truncated toward zero."""
    if isinstance(value, Integral):
        return int(value) * attos_per_unit
    if isinstance(value, Real):
        if not math.isfinite(value):
            raise ValueError(f"duration must be finite, got {value!r}")
        # int() on a Fraction truncates toward zero
        return int(Fraction(value) * attos_per_unit)
    raise TypeError(f"expected int or float, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Value object
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Duration:
    """Immutable signed time span with attosecond resolution.

    Attributes:
        high: Most significant word, a signed 64-bit integer carrying
            the sign of the whole value.
        low: Least significant word, an unsigned 64-bit integer.

    Equality compares both words; ordering compares ``high`` first
    (signed) and ``low`` on ties (unsigned).  Instances are hashable.

    Addition, subtraction and negation wrap at 2**128 without checking;
    everything that converts to or from 64-bit quantities raises
    :class:`~attospan.DurationOverflowError` when out of range.
    """

    high: int = 0
    low: int = 0

    ZERO: ClassVar[Duration]

    def __post_init__(self) -> None:
        if not _int128.fits_int64(self.high):
            raise ValueError(f"high word {self.high} is not a signed 64-bit integer")
        if not 0 <= self.low <= _int128.MASK64:
            raise ValueError(f"low word {self.low} is not an unsigned 64-bit integer")

    @classmethod
    def _from_words(cls, words: _int128.Words) -> Self:
        return cls(*words)

    @property
    def _words(self) -> _int128.Words:
        return (self.high, self.low)

    # -- construction --------------------------------------------------------

    @classmethod
    def zero(cls) -> Self:
        return cls(0, 0)

    @classmethod
    def from_components(cls, seconds: int, attoseconds: int) -> Self:
        """Build ``seconds + attoseconds * 1e-18`` exactly.

        The attoseconds term is added, so it may lie outside
        ``(-1e18, 1e18)`` and may have either sign::

            Duration.from_components(3, 123_000_000_000_000_000)   # 3.123 s
            Duration.from_components(3, -123_000_000_000_000_000)  # 2.877 s
            Duration.from_components(-3, -123_000_000_000_000_000) # -3.123 s

        Raises:
            DurationOverflowError: Either argument does not fit in a
                signed 64-bit integer.
        """
        return cls._from_words(_int128.from_components(seconds, attoseconds))

    @classmethod
    def _from_attoseconds(cls, attoseconds: int) -> Self:
        seconds, rest = divmod(attoseconds, _SECOND)
        return cls.from_components(seconds, rest)

    @classmethod
    def weeks(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _WEEK))

    @classmethod
    def days(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _DAY))

    @classmethod
    def hours(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _HOUR))

    @classmethod
    def minutes(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _MINUTE))

    @classmethod
    def seconds(cls, value: int | float) -> Self:
        """Duration of *value* seconds.

        ``int`` values are exact; ``float`` values are truncated toward
        zero to whole attoseconds.

        Raises:
            ValueError: *value* is NaN or infinite.
            DurationOverflowError: The whole seconds do not fit in a
                signed 64-bit integer.
        """
        return cls._from_attoseconds(_scaled_attoseconds(value, _SECOND))

    @classmethod
    def milliseconds(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _MILLISECOND))

    @classmethod
    def microseconds(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _MICROSECOND))

    @classmethod
    def nanoseconds(cls, value: int | float) -> Self:
        return cls._from_attoseconds(_scaled_attoseconds(value, _NANOSECOND))

    # -- decomposition -------------------------------------------------------

    @property
    def components(self) -> tuple[int, int]:
        """``(seconds, attoseconds)`` with ``|attoseconds| < 10**18``.

        The attoseconds share the sign of the whole value, so
        ``Duration.from_components(*d.components) == d``.

        Raises:
            DurationOverflowError: The whole seconds do not fit in a
                signed 64-bit integer.
        """
        return _int128.to_components(self._words)

    def total_seconds(self) -> float:
        """Approximate length in seconds (see :meth:`__truediv__`)."""
        return self / Duration.seconds(1)

    # -- timedelta interop ---------------------------------------------------

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Self:
        seconds = delta.days * _SECONDS_PER_DAY + delta.seconds
        return cls.from_components(seconds, delta.microseconds * _MICROSECOND)

    def to_timedelta(self) -> timedelta:
        """Convert to :class:`~datetime.timedelta`, truncating to microseconds.

        Raises:
            DurationOverflowError: The value is outside the range of
                ``timedelta``.
        """
        seconds, attoseconds = self.components
        microseconds = abs(attoseconds) // _MICROSECOND
        if attoseconds < 0:
            microseconds = -microseconds
        try:
            return timedelta(seconds=seconds, microseconds=microseconds)
        except OverflowError as exc:
            raise DurationOverflowError(
                f"{seconds} seconds is outside the timedelta range"
            ) from exc

    # -- arithmetic ----------------------------------------------------------

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_words(_int128.add(self._words, other._words))

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_words(_int128.subtract(self._words, other._words))

    def __neg__(self) -> Duration:
        return Duration._from_words(_int128.negate(self._words))

    def __pos__(self) -> Duration:
        return self

    def __abs__(self) -> Duration:
        return Duration._from_words(_int128.absolute(self._words))

    def __mul__(self, factor: object) -> Duration:
        if not isinstance(factor, Integral):
            return NotImplemented
        return Duration._from_words(_int128.multiply(self._words, int(factor)))

    __rmul__ = __mul__

    def div_rem(self, divisor: int) -> tuple[Duration, Duration]:
        """Truncating division by an integer, with remainder.

        Returns ``(quotient, remainder)`` such that
        ``quotient * divisor + remainder == self`` and the remainder has
        the sign of ``self``.

        Raises:
            ZeroDivisionError: *divisor* is zero.
            DurationOverflowError: *divisor* does not fit in a signed
                64-bit integer.
        """
        quotient, remainder = _int128.divide(self._words, divisor)
        return Duration._from_words(quotient), Duration._from_words(remainder)

    def __truediv__(self, other: object) -> Duration | float:
        """``Duration / int`` → truncated ``Duration``; ``Duration / Duration`` → ``float``.

        The ratio converts both operands to doubles as
        ``high * 2**64 + low`` before dividing, so it is an
        approximation for large magnitudes.
        """
        if isinstance(other, Duration):
            return _int128.ratio(self._words, other._words)
        if isinstance(other, Integral):
            return self.div_rem(int(other))[0]
        return NotImplemented

    def __lshift__(self, count: object) -> Duration:
        if not isinstance(count, Integral):
            return NotImplemented
        return Duration._from_words(_int128.shift_left(self._words, int(count)))

    def __rshift__(self, count: object) -> Duration:
        if not isinstance(count, Integral):
            return NotImplemented
        return Duration._from_words(_int128.shift_right(self._words, int(count)))

    def __bool__(self) -> bool:
        return self._words != _int128.ZERO

    # -- ordering ------------------------------------------------------------

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return _int128.compare(self._words, other._words) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return _int128.compare(self._words, other._words) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return _int128.compare(self._words, other._words) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return _int128.compare(self._words, other._words) >= 0


Duration.ZERO = Duration()
