"""Mutable holder for PerfectTime values.

PerfectTime itself never changes. MutablePerfectTime owns one PerfectTime
and replaces it wholesale, so readers see either the old or the new value
and never a partially updated one.
"""

import logging
import threading
from typing import Any

from typing_extensions import Self, override

from perfect_time.core import PerfectTime
from perfect_time.decimal_math import Number
from perfect_time.precision import PrecisionName, TimePrecision

logger = logging.getLogger(__name__)


class MutablePerfectTime:
    """A changeable, very precise instant in time.

    Holds a single immutable PerfectTime. Every setter builds the new value
    first and only then swaps it in under a lock; if building fails, the held
    value is left untouched.

    Example:
        >>> clock = MutablePerfectTime(0, "seconds")
        >>> clock.set_value(1500, "milliseconds").value
        '1.500000000000000000'
    """

    def __init__(
        self, time: Number, precision: TimePrecision | PrecisionName | str
    ) -> None:
        """
        Initialize the holder with ``time`` counted in ``precision`` units.

        Args:
            time: The initial instant, as accepted by ``PerfectTime.of``
            precision: Unit ``time`` is given in
        """
        self._lock: threading.Lock = threading.Lock()
        self._time: PerfectTime = PerfectTime.of(time, precision)

    @classmethod
    def from_time(cls, basis: PerfectTime) -> Self:
        """Create a holder starting at the same instant as ``basis``."""
        return cls(basis.value, TimePrecision.SECONDS)

    @property
    def time(self) -> PerfectTime:
        """The currently held immutable value."""
        return self._time

    @property
    def value(self) -> str:
        """Canonical string of the currently held value."""
        return self._time.value

    def set_value(
        self, new_value: Number, precision: TimePrecision | PrecisionName | str
    ) -> Self:
        """Replace the held instant, then return this holder.

        Args:
            new_value: The new instant, as accepted by ``PerfectTime.of``
            precision: Unit ``new_value`` is given in

        Returns:
            This holder, for chaining

        Raises:
            ParseError: If ``new_value`` cannot be parsed (value unchanged)
        """
        return self.set_time(PerfectTime.of(new_value, precision))

    def set_time(self, basis: PerfectTime) -> Self:
        """Replace the held instant with ``basis``, then return this holder."""
        if not isinstance(basis, PerfectTime):
            raise TypeError(
                f"set_time() requires a PerfectTime, got {type(basis).__name__!r}.\n"
                f"Hint: use set_value(value, precision) for numbers and strings"
            )
        with self._lock:
            previous, self._time = self._time, basis
        logger.debug("Replaced %s with %s", previous, basis)
        return self

    def as_unit(self, precision: TimePrecision | PrecisionName | str) -> str:
        """Return the held instant counted in ``precision`` units."""
        return self._time.as_unit(precision)

    def copy(self) -> Self:
        """Return an independent holder starting at the same instant."""
        return type(self).from_time(self._time)

    @override
    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, MutablePerfectTime):
            return NotImplemented
        return self._time == other._time

    __hash__ = None  # type: ignore[assignment]

    @override
    def __str__(self) -> str:
        return self._time.value

    @override
    def __repr__(self) -> str:
        return f"MutablePerfectTime({self._time.value!r})"


__all__ = ["MutablePerfectTime"]
