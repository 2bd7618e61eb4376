"""Two-word 128-bit signed integer kernel.

A 128-bit two's-complement integer is carried as a ``(high, low)`` word
pair: ``high`` is a signed 64-bit word holding the sign, ``low`` an
unsigned 64-bit word.  Every function here is pure and returns a new
pair; nothing is mutated and nothing is logged.

Python's ``int`` is arbitrary precision, so the fixed-width discipline
is enforced explicitly: every word is masked back to 64 bits after each
step and carries are propagated by hand.  The native ``int`` is only
used as an oracle in tests and for the float conversion in
:func:`ratio`.

Layout of the module follows the dependency order of the operations:

1. Representation helpers (words ↔ native values, sign extension)
2. Shifts
3. Add / subtract / negate
4. Compare
5. Scalar multiply and scalar divide
6. Construction from (seconds, attoseconds)
7. Ratio
"""

from __future__ import annotations

from attospan._errors import DurationOverflowError

Words = tuple[int, int]
"""A ``(high, low)`` pair: signed 64-bit high word, unsigned 64-bit low word."""

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MASK32 = 0xFFFF_FFFF
MASK64 = 0xFFFF_FFFF_FFFF_FFFF
SIGN64 = 1 << 63

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

ATTOS_PER_SECOND = 10**18

ZERO: Words = (0, 0)
ONE: Words = (0, 1)
MIN: Words = (INT64_MIN, 0)
MAX: Words = (INT64_MAX, MASK64)

_TWO_POW_64 = float(1 << 64)

# ---------------------------------------------------------------------------
# Representation helpers
# ---------------------------------------------------------------------------


def to_int64(value: int) -> int:
    """Reinterpret the low 64 bits of *value* as a signed word."""
    value &= MASK64
    return value - (1 << 64) if value & SIGN64 else value


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def from_int64(value: int) -> Words:
    """Sign-extend a signed 64-bit value to a word pair."""
    return (-1 if value < 0 else 0, value & MASK64)


def from_int(value: int) -> Words:
    """Split a native ``int`` into words, wrapping modulo 2**128."""
    return (to_int64(value >> 64), value & MASK64)


def to_int(words: Words) -> int:
    """Join a word pair back into a native ``int``."""
    high, low = words
    return (high << 64) | low


def is_negative(words: Words) -> bool:
    return words[0] < 0


def _unsigned_high(words: Words) -> int:
    return words[0] & MASK64


# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------


def shift_left(words: Words, count: int) -> Words:
    """Shift left by *count* bits, dropping bits above bit 127."""
    if count < 0:
        raise ValueError(f"negative shift count: {count}")
    high, low = words
    if count == 0:
        return words
    if count >= 128:
        return ZERO
    if count >= 64:
        return (to_int64(low << (count - 64)), 0)
    return (
        to_int64((high << count) | (low >> (64 - count))),
        (low << count) & MASK64,
    )


def shift_right(words: Words, count: int) -> Words:
    """Arithmetic right shift; vacated bits are filled with the sign."""
    if count < 0:
        raise ValueError(f"negative shift count: {count}")
    high, low = words
    if count == 0:
        return words
    if count >= 128:
        return (-1, MASK64) if high < 0 else ZERO
    if count >= 64:
        return (high >> 63, (high >> (count - 64)) & MASK64)
    return (
        high >> count,
        ((low >> count) | (high << (64 - count))) & MASK64,
    )


def _logical_shift_right(words: Words, count: int) -> Words:
    # Treats the pair as unsigned; used by the long division on magnitudes.
    uhigh = _unsigned_high(words)
    low = words[1]
    if count == 0:
        return words
    if count >= 64:
        return (0, uhigh >> (count - 64))
    return (
        uhigh >> count,
        ((low >> count) | (uhigh << (64 - count))) & MASK64,
    )


# ---------------------------------------------------------------------------
# Add / subtract / negate
# ---------------------------------------------------------------------------


def add(lhs: Words, rhs: Words) -> Words:
    """Wrapping 128-bit addition with carry from the low word."""
    low = lhs[1] + rhs[1]
    carry = low >> 64
    return (to_int64(lhs[0] + rhs[0] + carry), low & MASK64)


def subtract(lhs: Words, rhs: Words) -> Words:
    """Wrapping 128-bit subtraction with borrow from the low word."""
    low = lhs[1] - rhs[1]
    borrow = 1 if low < 0 else 0
    return (to_int64(lhs[0] - rhs[0] - borrow), low & MASK64)


def negate(words: Words) -> Words:
    """Two's-complement negation: complement both words, add one.

    ``negate(MIN) == MIN``, as in hardware.
    """
    high, low = words
    return add((~high, ~low & MASK64), ONE)


def absolute(words: Words) -> Words:
    return negate(words) if is_negative(words) else words


# ---------------------------------------------------------------------------
# Compare
# ---------------------------------------------------------------------------


def compare(lhs: Words, rhs: Words) -> int:
    """Three-way signed compare: -1, 0 or 1.

    ``high`` decides (signed); ``low`` breaks ties (unsigned).
    """
    if lhs[0] != rhs[0]:
        return -1 if lhs[0] < rhs[0] else 1
    if lhs[1] != rhs[1]:
        return -1 if lhs[1] < rhs[1] else 1
    return 0


def _compare_unsigned(lhs: Words, rhs: Words) -> int:
    lhs_high, rhs_high = _unsigned_high(lhs), _unsigned_high(rhs)
    if lhs_high != rhs_high:
        return -1 if lhs_high < rhs_high else 1
    if lhs[1] != rhs[1]:
        return -1 if lhs[1] < rhs[1] else 1
    return 0


# ---------------------------------------------------------------------------
# Scalar multiply
# ---------------------------------------------------------------------------


def _limbs(words: Words) -> list[int]:
    """Little-endian 32-bit limbs of the unsigned view of *words*."""
    uhigh = _unsigned_high(words)
    low = words[1]
    return [low & MASK32, low >> 32, uhigh & MASK32, uhigh >> 32]


def _multiply_limbs(lhs: list[int], rhs: list[int]) -> list[int]:
    """Schoolbook product of little-endian 32-bit limb vectors.

    Every intermediate ``limb * limb + limb + carry`` fits 64 bits.
    """
    product = [0] * (len(lhs) + len(rhs))
    for i, a in enumerate(lhs):
        carry = 0
        for j, b in enumerate(rhs):
            t = product[i + j] + a * b + carry
            product[i + j] = t & MASK32
            carry = t >> 32
        product[i + len(rhs)] = carry
    return product


def multiply(words: Words, factor: int) -> Words:
    """Multiply by a signed 64-bit *factor*.

    Magnitudes are multiplied limb by limb into a 192-bit product; the
    sign is restored afterwards.  A product outside the signed 128-bit
    range raises :class:`DurationOverflowError`.
    """
    if not fits_int64(factor):
        raise DurationOverflowError(f"multiplier {factor} does not fit in 64 bits")

    negative = is_negative(words) != (factor < 0)
    magnitude = absolute(words)
    factor_magnitude = abs(factor)

    p = _multiply_limbs(
        _limbs(magnitude),
        [factor_magnitude & MASK32, factor_magnitude >> 32],
    )
    uhigh = p[2] | (p[3] << 32)
    low = p[0] | (p[1] << 32)

    limit_exceeded = uhigh > SIGN64 or (uhigh == SIGN64 and (low != 0 or not negative))
    if p[4] or p[5] or limit_exceeded:
        raise DurationOverflowError("product does not fit in 128 bits")

    result = (to_int64(uhigh), low)
    return negate(result) if negative else result


# ---------------------------------------------------------------------------
# Scalar divide
# ---------------------------------------------------------------------------


def divide(words: Words, divisor: int) -> tuple[Words, Words]:
    """Truncating division by a signed 64-bit *divisor*.

    Returns ``(quotient, remainder)`` with
    ``words == quotient * divisor + remainder`` and the remainder taking
    the sign of the dividend.

    Binary long division over the magnitudes, one bit per step from
    bit 127 down to bit 0, then sign restoration.

    Raises:
        ZeroDivisionError: *divisor* is zero.
        DurationOverflowError: *divisor* does not fit in 64 bits, or the
            quotient is unrepresentable (``MIN / -1``).
    """
    if divisor == 0:
        raise ZeroDivisionError("divide by zero")
    if not fits_int64(divisor):
        raise DurationOverflowError(f"divisor {divisor} does not fit in 64 bits")

    # Magnitudes are read unsigned so that |MIN| == 2**127 is handled.
    remainder = absolute(words)
    quotient = ZERO
    divisor_words = (0, abs(divisor))

    for bit in range(127, -1, -1):
        quotient = shift_left(quotient, 1)
        if _compare_unsigned(_logical_shift_right(remainder, bit), divisor_words) >= 0:
            remainder = subtract(remainder, shift_left(divisor_words, bit))
            quotient = (quotient[0], quotient[1] | 1)

    dividend_negative = is_negative(words)
    if dividend_negative != (divisor < 0):
        quotient = negate(quotient)
    elif is_negative(quotient):
        raise DurationOverflowError("quotient does not fit in 128 bits")
    if dividend_negative:
        remainder = negate(remainder)
    return quotient, remainder


# ---------------------------------------------------------------------------
# Construction from components
# ---------------------------------------------------------------------------


def from_components(seconds: int, attoseconds: int) -> Words:
    """Build ``seconds * 10**18 + attoseconds`` exactly.

    *attoseconds* need not be normalized; it is sign-extended to 128
    bits and added with carry.  Both arguments must fit in 64 bits.
    """
    if not fits_int64(seconds):
        raise DurationOverflowError(f"seconds component {seconds} does not fit in 64 bits")
    if not fits_int64(attoseconds):
        raise DurationOverflowError(
            f"attoseconds component {attoseconds} does not fit in 64 bits"
        )
    whole = multiply(from_int64(seconds), ATTOS_PER_SECOND)
    return add(whole, from_int64(attoseconds))


def to_components(words: Words) -> tuple[int, int]:
    """Split into ``(seconds, attoseconds)`` by dividing by 10**18.

    Raises:
        DurationOverflowError: the whole seconds do not fit in 64 bits.
    """
    quotient, remainder = divide(words, ATTOS_PER_SECOND)
    seconds = to_int64(quotient[1])
    if from_int64(seconds) != quotient:
        raise DurationOverflowError("seconds component does not fit in 64 bits")
    return seconds, to_int64(remainder[1])


# ---------------------------------------------------------------------------
# Ratio
# ---------------------------------------------------------------------------


def to_float(words: Words) -> float:
    """Approximate value as ``high * 2**64 + low`` in double precision."""
    high, low = words
    return float(high) * _TWO_POW_64 + float(low)


def ratio(lhs: Words, rhs: Words) -> float:
    """Approximate ``lhs / rhs``; precision is lost for large magnitudes."""
    return to_float(lhs) / to_float(rhs)
