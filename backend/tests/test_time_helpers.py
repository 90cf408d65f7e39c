import math

import pytest

from splits_core.duration import duration
from splits_core.errors import MalformedFieldError
from splits_core.timecodec import (
    DIFF_PLACEHOLDER,
    format_diff,
    format_time,
    lenient_number,
    parse_time,
    to_number,
)


def test_parse_time_zero_sentinel_and_empty_are_unrecorded() -> None:
    assert parse_time("00:00:00", "0") == 0
    assert parse_time("", "5") == 0
    assert parse_time(None, None) == 0


def test_parse_time_adds_deciles() -> None:
    assert parse_time("01:02:03", "5") == 3723.5
    assert parse_time("10:00:00", "") == 36000


def test_parse_time_allows_hours_past_midnight_for_long_events() -> None:
    assert parse_time("25:00:00", "0") == 90000


def test_parse_time_malformed_components_become_zero() -> None:
    assert parse_time("xx:01:05", "?") == 65
    assert parse_time("01:05", "2") == 65.2


def test_format_time_zero_and_nan() -> None:
    assert format_time(0) == "0.0"
    assert format_time(math.nan) == "0.0"
    assert format_time(None) == "0.0"


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (7.24, "7.2"),
        (42.0, "42.0"),
        (65.3, "1:05.3"),
        (600.0, "10:00.0"),
        (3665.0, "1:01:05.0"),
        (59.96, "1:00.0"),
    ],
)
def test_format_time_picks_compact_form(seconds: float, expected: str) -> None:
    assert format_time(seconds) == expected


def test_parse_then_format_keeps_minutes_and_seconds() -> None:
    assert format_time(parse_time("00:07:32", "0")) == "7:32.0"


def test_format_diff_blank_for_no_gap() -> None:
    assert format_diff(0) == DIFF_PLACEHOLDER
    assert format_diff(0.0) == " "


def test_format_diff_signs() -> None:
    assert format_diff(2.5) == "+2.5"
    assert format_diff(-61.0) == "-1:01.0"


def test_duration_unrecorded_checkpoint_is_zero() -> None:
    assert duration(0, 36000) == 0
    assert duration(36000, 0) == 0


def test_duration_plain_difference() -> None:
    assert duration(36000, 36245.5) == 245.5


def test_duration_corrects_midnight_rollover() -> None:
    assert duration(86390, 5) == 15


def test_duration_small_negative_passes_through() -> None:
    # Within the tolerance band: not treated as a midnight wrap.
    assert duration(36000, 35500) == -500
    assert duration(36000, 35000) == -1000
    assert duration(36000, 34999) == 34999 - 36000 + 86400


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan, 10**400, "1e400", "inf", "NaN"])
def test_lenient_number_rejects_non_finite_values(value) -> None:
    assert lenient_number(value) == 0.0


def test_strict_number_raises_for_non_finite_numbers() -> None:
    with pytest.raises(MalformedFieldError):
        to_number(math.inf)
    with pytest.raises(MalformedFieldError):
        to_number(10**400)
    assert to_number(12) == 12.0


def test_format_time_non_finite_is_zero() -> None:
    assert format_time(math.inf) == "0.0"
    assert format_time(-math.inf) == "0.0"
    assert format_time(1.7e308) == "0.0"


def test_parse_time_overflowing_hours_is_zero() -> None:
    assert parse_time("1e308:00:00", "0") == 0
