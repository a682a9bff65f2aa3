import logging
import math
import struct
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from functools import cached_property
from time import time_ns
from typing import Any

from typing_extensions import Self, override

from perfect_time.decimal_math import (
    Number,
    format_fixed,
    is_exact,
    parse_canonical,
    parse_number,
    round_half_up,
)
from perfect_time.precision import PrecisionName, TimePrecision
from perfect_time.util import FRACTIONAL_DIGITS, OUTPUT_PRECISION, WORKING_PRECISION

logger = logging.getLogger(__name__)

# Wall clock returning whole milliseconds since the Unix epoch
Clock = Callable[[], int]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def system_milliseconds() -> int:
    """Read the host wall clock in whole milliseconds since the epoch."""
    return time_ns() // 1_000_000


def _narrow(value: int, bits: int) -> int:
    """Keep the low-order ``bits`` of ``value`` as a two's complement integer."""
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _pack_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _nearest_float32(exact: Fraction, approximate: float) -> float:
    """Pick the single-precision value nearest ``exact``, ties to even.

    ``approximate`` went through a double first, so the answer is either it
    or one of its single-precision neighbours.
    """
    (bits,) = struct.unpack("<I", struct.pack("<f", approximate))
    candidates = {bits, bits + 1}
    if bits & 0x7FFFFFFF:
        candidates.add(bits - 1)
    else:
        # zero: the neighbour toward the sign is the smallest subnormal
        candidates.add(bits | 1)
    floats = [
        (struct.unpack("<f", struct.pack("<I", candidate))[0], candidate)
        for candidate in candidates
        if candidate & 0x7F800000 != 0x7F800000
    ]
    nearest, _ = min(
        floats, key=lambda pair: (abs(Fraction(pair[0]) - exact), pair[1] & 1)
    )
    return nearest


@dataclass(frozen=True)
class PerfectTime:
    """A very precise instant, in seconds since the Unix epoch.

    The instant is stored as its canonical string: an optional ``-``, the
    integer digits, ``.`` and exactly 18 fractional digits, so the value is
    exact down to the attosecond. Sources coarser than that are padded with
    zeros (``1456021196.012000000000000000`` for a millisecond clock) and
    finer ones are rounded half-up at the 18th fractional digit.

    Zero is always unsigned. ``-0`` and negative inputs that round to zero
    both become ``0.000000000000000000``.

    Build values with ``PerfectTime.of(time, precision)``. Calling the class
    directly only accepts an already canonical string.

    Example:
        >>> PerfectTime.of(1456021196012, TimePrecision.MILLISECONDS)
        PerfectTime('1456021196.012000000000000000')
        >>> PerfectTime.of(1, "days").as_unit("seconds")
        '86400.000000000000000000'
    """

    value: str

    def __post_init__(self) -> None:
        parse_canonical(self.value)

    @classmethod
    def of(
        cls, time: Number, precision: TimePrecision | PrecisionName | str
    ) -> Self:
        """Create a value from ``time`` counted in ``precision`` units.

        Args:
            time: Count of ``precision`` units since the epoch. Strings must be
                plain decimals (sign, digits, one optional radix point).
            precision: Unit ``time`` is given in, as a member or its name

        Raises:
            ParseError: If ``time`` is a malformed string or not finite
            TypeError: If ``time`` is of an unsupported type
            ValueError: If ``precision`` names no unit

        The input and the intermediate quotient are rounded half-up at the
        working precision (50 fractional digits) before the final rounding
        to 18 digits. Converting back with ``as_unit`` rounds at the output
        precision, so only seconds and finer units round trip exactly.
        """
        unit = TimePrecision.coerce(precision)
        number = parse_number(time)
        if not is_exact(number, WORKING_PRECISION):
            logger.debug(
                "Rounding %r half-up to %d fractional digits",
                time,
                WORKING_PRECISION,
            )
        working = round_half_up(number, WORKING_PRECISION)
        per_second = round_half_up(Fraction(unit.per_second), WORKING_PRECISION)
        seconds = round_half_up(working / per_second, WORKING_PRECISION)
        return cls(format_fixed(seconds, FRACTIONAL_DIGITS))

    @classmethod
    def now(cls, clock: Clock | None = None) -> Self:
        """Return the current time, as precise as the clock reads it.

        Args:
            clock: Wall clock in milliseconds since the epoch. Defaults to the
                host clock.
        """
        milliseconds = (clock or system_milliseconds)()
        return cls.of(milliseconds, TimePrecision.MILLISECONDS)

    @classmethod
    def from_datetime(cls, moment: datetime) -> Self:
        """Create a value from a timezone-aware datetime, exact to the microsecond.

        Raises:
            TypeError: If ``moment`` is naive
        """
        if moment.tzinfo is None:
            raise TypeError(
                f"PerfectTime.from_datetime requires a timezone-aware datetime.\n"
                f"Got naive datetime: {moment!r}\n"
                f"Hint: Add timezone info:\n"
                f"  dt = datetime(..., tzinfo=timezone.utc)"
            )
        return cls.of((moment - _EPOCH) // timedelta(microseconds=1), "microseconds")

    @cached_property
    def _seconds(self) -> Fraction:
        return Fraction(Decimal(self.value))

    def as_unit(self, precision: TimePrecision | PrecisionName | str) -> str:
        """Return this instant counted in ``precision`` units.

        The result has the canonical layout with 18 fractional digits,
        rounded half-up. ``PerfectTime.of(t.as_unit(u), u)`` reproduces ``t``
        for seconds and finer units; coarser units are exact only to 18
        fractional digits of that unit.
        """
        unit = TimePrecision.coerce(precision)
        counted = self._seconds * Fraction(unit.per_second)
        return format_fixed(counted, OUTPUT_PRECISION)

    def to_decimal(self) -> Decimal:
        """Exact ``Decimal`` copy of this instant in seconds."""
        return Decimal(self.value)

    def to_int(self) -> int:
        """Whole seconds, discarding the fractional part (lossy)."""
        return int(self._seconds)

    def to_int32(self) -> int:
        """Whole seconds narrowed to a signed 32-bit integer (lossy, wraps)."""
        return _narrow(self.to_int(), 32)

    def to_int64(self) -> int:
        """Whole seconds narrowed to a signed 64-bit integer (lossy, wraps)."""
        return _narrow(self.to_int(), 64)

    def to_float(self) -> float:
        """Nearest double-precision float (lossy)."""
        try:
            return float(self._seconds)
        except OverflowError:
            return math.inf if self._seconds > 0 else -math.inf

    def to_float32(self) -> float:
        """Nearest single-precision float, widened back to a Python float (lossy).

        Rounds from the exact value, so the intermediate double never shifts a
        result across a single-precision midpoint.
        """
        seconds = self.to_float()
        try:
            approximate = _pack_float32(seconds)
        except OverflowError:
            return math.copysign(math.inf, seconds)
        if math.isinf(approximate):
            return approximate
        return _nearest_float32(self._seconds, approximate)

    def to_datetime(self) -> datetime:
        """UTC datetime floored to the microsecond (lossy).

        Only instants between 0001-01-01 and 9999-12-31T23:59:59.999999 UTC fit
        in a datetime.

        Raises:
            ValueError: If the instant is outside the datetime range
        """
        microseconds = math.floor(self._seconds * 1_000_000)
        try:
            return _EPOCH + timedelta(microseconds=microseconds)
        except OverflowError as error:
            raise ValueError(
                f"PerfectTime {self.value} is outside the datetime range.\n"
                f"datetime only covers years 1 to 9999.\n"
                f"Hint: keep the canonical string, or use to_decimal() for arithmetic"
            ) from error

    def __int__(self) -> int:
        return self.to_int()

    def __float__(self) -> float:
        return self.to_float()

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, PerfectTime):
            return NotImplemented
        return self._seconds < other._seconds

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, PerfectTime):
            return NotImplemented
        return self._seconds <= other._seconds

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, PerfectTime):
            return NotImplemented
        return self._seconds > other._seconds

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, PerfectTime):
            return NotImplemented
        return self._seconds >= other._seconds

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    @override
    def __str__(self) -> str:
        return self.value

    @override
    def __repr__(self) -> str:
        return f"PerfectTime({self.value!r})"


def current_time(clock: Clock | None = None) -> PerfectTime:
    """Return the current time as a PerfectTime (millisecond precision).

    Example:
        >>> from perfect_time import current_time
        >>> now = current_time()
        >>> len(now.value.split(".")[1])
        18
    """
    return PerfectTime.now(clock)


def current_time_to_string(clock: Clock | None = None) -> str:
    """Return the current time as a canonical string."""
    return current_time(clock).value
