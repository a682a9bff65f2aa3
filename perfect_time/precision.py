"""Time units with exact decimal conversion factors.

Each unit knows how many of it fit in one second and how many seconds one
of it spans. Both factors are kept as exact decimal strings (never floats)
because units such as years do not have a finite binary representation.
The per-second factors of the year-based units are carried to more than
50 fractional digits.
"""

from decimal import Decimal
from enum import Enum
from typing import Literal, TypeAlias

PrecisionName: TypeAlias = Literal[
    "millennia",
    "centuries",
    "years",
    "days",
    "seconds",
    "milliseconds",
    "microseconds",
    "nanoseconds",
    "femtoseconds",
    "attoseconds",
]


class TimePrecision(Enum):
    """Closed set of units a time value can be expressed in.

    Members are defined as ``(per_second, seconds_per_unit)`` string pairs.

    Attributes:
        per_second: Count of this unit in one second
        seconds_per_unit: Seconds spanned by one of this unit
    """

    # 1,000 average Gregorian years
    MILLENNIA = (
        ".000000000031688765366335366091139568738996430758545636762947",
        "31556925252.2016",
    )
    # 100 average Gregorian years
    CENTURIES = (
        ".00000000031688765366335366091139568738996430758545636762947",
        "3155692525.22016",
    )
    # 1 average Gregorian year
    YEARS = (
        ".000000031688765366335366091139568738996430758545636762947",
        "31556925.2522016",
    )
    DAYS = ("0.000011574074074074074074074074074074074074074074074074", "86400")
    SECONDS = ("1", "1")
    MILLISECONDS = ("1000", "0.001")
    MICROSECONDS = ("1000000", "0.000001")
    NANOSECONDS = ("1000000000", "0.000000001")
    FEMTOSECONDS = ("1000000000000000", "0.000000000000001")
    ATTOSECONDS = ("1000000000000000000", "0.000000000000000001")

    def __init__(self, per_second: str, seconds_per_unit: str) -> None:
        self.per_second: Decimal = Decimal(per_second)
        self.seconds_per_unit: Decimal = Decimal(seconds_per_unit)

    @classmethod
    def coerce(cls, unit: "TimePrecision | PrecisionName | str") -> "TimePrecision":
        """Return the member for ``unit``, given as a member or a name.

        Names are case-insensitive ("milliseconds", "MILLISECONDS").

        Raises:
            ValueError: If ``unit`` names no member
            TypeError: If ``unit`` is neither a member nor a string
        """
        if isinstance(unit, TimePrecision):
            return unit
        if not isinstance(unit, str):
            raise TypeError(
                f"Precision must be a TimePrecision or its name.\n"
                f"Got {type(unit).__name__!r}: {unit!r}\n"
                f"Examples:\n"
                f"  TimePrecision.MILLISECONDS\n"
                f"  'milliseconds'"
            )
        name = unit.upper()
        if name not in cls.__members__:
            valid = ", ".join(member.name.lower() for member in cls)
            raise ValueError(f"Invalid precision '{unit}'. Valid precisions: {valid}")
        return cls[name]
