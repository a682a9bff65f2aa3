"""Tests for the lossy numeric and datetime coercions."""

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from perfect_time import PerfectTime, TimePrecision


@pytest.mark.parametrize(
    ("time", "expected"),
    [
        ("1.9", 1),
        ("-1.9", -1),
        ("0.999999999999999999", 0),
        ("1456021196.012", 1456021196),
    ],
)
def test_to_int_truncates_toward_zero(time, expected):
    """Test that integer coercion drops the fractional part."""
    pt = PerfectTime.of(time, TimePrecision.SECONDS)

    assert pt.to_int() == expected
    assert int(pt) == expected


def test_to_int_is_unbounded():
    """Test that plain integer coercion keeps every digit."""
    pt = PerfectTime.of("12345678911234567892123456789.5", "seconds")

    assert pt.to_int() == 12345678911234567892123456789


@pytest.mark.parametrize(
    ("time", "expected"),
    [
        (2**31 - 1, 2**31 - 1),
        (2**31, -(2**31)),
        (2**32 + 1, 1),
        (-(2**31) - 1, 2**31 - 1),
    ],
)
def test_to_int32_wraps(time, expected):
    """Test that 32-bit narrowing keeps the low-order bits."""
    assert PerfectTime.of(time, "seconds").to_int32() == expected


@pytest.mark.parametrize(
    ("time", "expected"),
    [
        (1456021196, 1456021196),
        (2**63, -(2**63)),
        (2**64 + 5, 5),
        (-(2**63), -(2**63)),
    ],
)
def test_to_int64_wraps(time, expected):
    """Test that 64-bit narrowing keeps the low-order bits."""
    assert PerfectTime.of(time, "seconds").to_int64() == expected


def test_to_float():
    """Test double-precision coercion."""
    pt = PerfectTime.of("1.5", "seconds")

    assert pt.to_float() == 1.5
    assert float(pt) == 1.5


def test_to_float_loses_digits():
    """Test that doubles cannot hold all 18 fractional digits."""
    pt = PerfectTime.of("1456021196.012345678901234567", "seconds")

    assert pt.to_float() == 1456021196.0123458
    assert PerfectTime.of(pt.to_float(), "seconds") != pt


def test_to_float_overflows_to_infinity():
    """Test that huge instants become infinite floats."""
    huge = "1" + "0" * 400

    assert PerfectTime.of(huge, "seconds").to_float() == math.inf
    assert PerfectTime.of("-" + huge, "seconds").to_float() == -math.inf


def test_to_float32():
    """Test single-precision coercion."""
    assert PerfectTime.of("0.1", "seconds").to_float32() == 0.10000000149011612
    assert PerfectTime.of("1.5", "seconds").to_float32() == 1.5


def test_to_float32_overflows_to_infinity():
    """Test that instants beyond single precision become infinite."""
    big = "1" + "0" * 39

    assert PerfectTime.of(big, "seconds").to_float32() == math.inf
    assert PerfectTime.of("-" + big, "seconds").to_float32() == -math.inf


def test_to_decimal_is_exact():
    """Test that the Decimal copy keeps every digit."""
    pt = PerfectTime.of("1456021196.012345678901234567", "seconds")

    assert pt.to_decimal() == Decimal("1456021196.012345678901234567")
    assert str(pt.to_decimal()) == pt.value


def test_to_datetime():
    """Test conversion to an aware UTC datetime."""
    pt = PerfectTime.of(1456021196012, TimePrecision.MILLISECONDS)

    assert pt.to_datetime() == datetime(
        2016, 2, 21, 2, 19, 56, 12000, tzinfo=timezone.utc
    )
    assert pt.to_datetime().tzinfo is timezone.utc


def test_to_datetime_floors_sub_microsecond_digits():
    """Test that digits finer than a microsecond are floored."""
    after = PerfectTime.of("0.0000019", "seconds").to_datetime()
    before = PerfectTime.of("-0.0000005", "seconds").to_datetime()

    assert after == datetime(1970, 1, 1, 0, 0, 0, 1, tzinfo=timezone.utc)
    assert before == datetime(1969, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_from_datetime():
    """Test creation from an aware datetime in any zone."""
    utc = datetime(2016, 2, 21, 2, 19, 56, 12000, tzinfo=timezone.utc)
    plus_one = datetime(
        2016, 2, 21, 3, 19, 56, 12000, tzinfo=timezone(timedelta(hours=1))
    )

    assert PerfectTime.from_datetime(utc).value == "1456021196.012000000000000000"
    assert PerfectTime.from_datetime(plus_one) == PerfectTime.from_datetime(utc)


def test_from_datetime_before_epoch():
    """Test that pre-epoch datetimes become negative instants."""
    moment = datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

    assert PerfectTime.from_datetime(moment).value == "-1.000000000000000000"


def test_from_datetime_rejects_naive():
    """Test that naive datetimes are refused."""
    with pytest.raises(TypeError, match="timezone-aware"):
        PerfectTime.from_datetime(datetime(2016, 2, 21))


def test_datetime_round_trip():
    """Test that microsecond datetimes survive a round trip."""
    moment = datetime(2025, 1, 6, 12, 30, 15, 123456, tzinfo=timezone.utc)

    assert PerfectTime.from_datetime(moment).to_datetime() == moment


def test_to_float32_rounds_from_the_exact_value():
    """Test that a value just above a single-precision midpoint rounds up."""
    pt = PerfectTime.of("1.000000059604644776", "seconds")

    assert pt.to_float32() == 1.0000001192092896


def test_to_float32_just_below_midpoint_rounds_down():
    """Test the other side of the same single-precision midpoint."""
    pt = PerfectTime.of("1.000000059604644775", "seconds")

    assert pt.to_float32() == 1.0


def test_to_float32_rounds_negative_values_away_from_midpoint():
    """Test that negative values just past a midpoint round outward."""
    pt = PerfectTime.of("-1.000000059604644776", "seconds")

    assert pt.to_float32() == -1.0000001192092896
    assert PerfectTime.of(0, "seconds").to_float32() == 0.0


@pytest.mark.parametrize("years", [20000, -20000])
def test_to_datetime_outside_range(years):
    """Test that instants beyond datetime's years raise a ValueError."""
    pt = PerfectTime.of(years, TimePrecision.YEARS)

    with pytest.raises(ValueError, match="outside the datetime range"):
        pt.to_datetime()


def test_to_datetime_range_edges():
    """Test the first and last instants a datetime can hold."""
    first = datetime(1, 1, 1, tzinfo=timezone.utc)
    last = datetime(9999, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)

    assert PerfectTime.from_datetime(first).to_datetime() == first
    assert PerfectTime.from_datetime(last).to_datetime() == last
    with pytest.raises(ValueError, match="years 1 to 9999"):
        PerfectTime.of(last.timestamp() + 1, "seconds").to_datetime()
