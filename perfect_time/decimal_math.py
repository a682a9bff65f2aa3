"""Exact base-10 arithmetic backing PerfectTime.

Numbers are held as ``fractions.Fraction`` between parsing and formatting,
so no intermediate result depends on a ``decimal`` context precision or on
binary floating point. Rounding is always half-up (ties away from zero) at
a fixed count of fractional digits.
"""

import math
import re
from decimal import Decimal
from fractions import Fraction
from typing import TypeAlias

from perfect_time.errors import ParseError
from perfect_time.util import FRACTIONAL_DIGITS, RADIX_POINT

Number: TypeAlias = int | float | Decimal | str

_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_CANONICAL_PATTERN = re.compile(rf"-?[0-9]+\.[0-9]{{{FRACTIONAL_DIGITS}}}")


def parse_number(value: Number) -> Fraction:
    """Read ``value`` as an exact rational number.

    Strings must be plain decimals: an optional sign, digits and at most one
    radix point. Floats are read through their shortest round-tripping
    ``repr``, so ``0.1`` is taken as exactly one tenth.

    Raises:
        ParseError: If a string is malformed or a number is not finite
        TypeError: If ``value`` is not an int, float, Decimal or str
    """
    if isinstance(value, bool):
        raise TypeError(
            f"Time must be a number or a decimal string, got bool: {value!r}"
        )
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ParseError(f"Time must be a finite number, got {value!r}")
        return Fraction(Decimal(repr(value)))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ParseError(f"Time must be a finite number, got {value!r}")
        return Fraction(value)
    if isinstance(value, str):
        if _NUMBER_PATTERN.fullmatch(value) is None:
            raise ParseError(
                f"Cannot parse {value!r} as a decimal number.\n"
                f"Expected an optional sign, digits and at most one radix point "
                f"(no exponent, whitespace or separators).\n"
                f"Examples: '1456021196012', '-123456789.01234567', '.5'"
            )
        return Fraction(Decimal(value))
    raise TypeError(
        f"Time must be int, float, Decimal or str.\n"
        f"Got {type(value).__name__!r}: {value!r}"
    )


def round_half_up(value: Fraction, digits: int) -> Fraction:
    """Round ``value`` to ``digits`` fractional digits, ties away from zero."""
    scale = 10**digits
    scaled = abs(value) * scale
    whole, remainder = divmod(scaled.numerator, scaled.denominator)
    if 2 * remainder >= scaled.denominator:
        whole += 1
    return Fraction(-whole if value < 0 else whole, scale)


def is_exact(value: Fraction, digits: int) -> bool:
    """True if ``value`` needs no more than ``digits`` fractional digits."""
    return (value * 10**digits).denominator == 1


def format_fixed(value: Fraction, digits: int) -> str:
    """Render ``value`` with exactly ``digits`` fractional digits.

    The value is rounded half-up first and zero-padded on the right when it
    is coarser. Zero never carries a sign.
    """
    scaled = int(round_half_up(value, digits) * 10**digits)
    # Decimal has no digit limit on int conversion, unlike str()
    text = format(Decimal(abs(scaled)), "f").rjust(digits + 1, "0")
    sign = "-" if scaled < 0 else ""
    if digits == 0:
        return f"{sign}{text}"
    split = len(text) - digits
    return f"{sign}{text[:split]}{RADIX_POINT}{text[split:]}"


def parse_canonical(text: str) -> Fraction:
    """Read a canonical seconds string, rejecting any other spelling.

    Raises:
        ParseError: If ``text`` is not in canonical form
    """
    if not isinstance(text, str) or _CANONICAL_PATTERN.fullmatch(text) is None:
        raise ParseError(
            f"Not a canonical time string: {text!r}\n"
            f"Expected an optional '-', integer digits, '{RADIX_POINT}' and "
            f"exactly {FRACTIONAL_DIGITS} fractional digits.\n"
            f"Example: '1456021196.012000000000000000'"
        )
    seconds = Fraction(Decimal(text))
    if format_fixed(seconds, FRACTIONAL_DIGITS) != text:
        raise ParseError(
            f"Not a canonical time string: {text!r}\n"
            f"Hint: drop leading zeros and the sign of zero, e.g. "
            f"{format_fixed(seconds, FRACTIONAL_DIGITS)!r}"
        )
    return seconds
