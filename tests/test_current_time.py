"""Tests for reading the current time."""

import time

from perfect_time import PerfectTime, current_time, current_time_to_string
from perfect_time.core import system_milliseconds


def test_now_reads_injected_clock():
    """Test that the clock's milliseconds become the instant."""
    pt = PerfectTime.now(clock=lambda: 1456021196012)

    assert pt.value == "1456021196.012000000000000000"


def test_current_time_reads_injected_clock():
    """Test the module-level helpers with a fixed clock."""
    clock = lambda: -1500  # noqa: E731

    assert current_time(clock) == PerfectTime.of("-1.5", "seconds")
    assert current_time_to_string(clock) == "-1.500000000000000000"


def test_current_time_uses_system_clock():
    """Test that the default clock tracks the host wall clock."""
    before = time.time_ns() // 1_000_000
    now = current_time()
    after = time.time_ns() // 1_000_000

    assert PerfectTime.of(before, "milliseconds") <= now
    assert now <= PerfectTime.of(after, "milliseconds")


def test_current_time_has_millisecond_granularity():
    """Test that only the first three fractional digits can be non-zero."""
    fraction = current_time_to_string().split(".")[1]

    assert len(fraction) == 18
    assert fraction[3:] == "000000000000000"


def test_system_milliseconds_is_an_int():
    """Test the default clock's return type."""
    assert isinstance(system_milliseconds(), int)
