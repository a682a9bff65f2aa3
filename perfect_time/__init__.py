from .core import Clock, PerfectTime, current_time, current_time_to_string
from .errors import ParseError
from .mutable import MutablePerfectTime
from .precision import PrecisionName, TimePrecision
from .util import FRACTIONAL_DIGITS, OUTPUT_PRECISION, WORKING_PRECISION

__all__ = [
    "PerfectTime",
    "MutablePerfectTime",
    "TimePrecision",
    "PrecisionName",
    "ParseError",
    "Clock",
    "current_time",
    "current_time_to_string",
    "FRACTIONAL_DIGITS",
    "WORKING_PRECISION",
    "OUTPUT_PRECISION",
]
