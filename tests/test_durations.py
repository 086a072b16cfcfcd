"""Tests for interval parsing."""

from datetime import timedelta

import pytest

from gator.exceptions import BadIntervalError, ValidationError
from gator.utils.durations import format_duration, parse_duration


@pytest.mark.parametrize(
    "value, expected",
    [
        ("30s", timedelta(seconds=30)),
        ("1m", timedelta(minutes=1)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5h", timedelta(minutes=90)),
        ("500ms", timedelta(milliseconds=500)),
        (" 2m ", timedelta(minutes=2)),
    ],
)
def test_parse_duration_valid(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize(
    "value", ["", "abc", "10", "1x", "-1s", "0s", "1m junk", "100000000000h"]
)
def test_parse_duration_invalid(value):
    with pytest.raises(BadIntervalError) as exc_info:
        parse_duration(value)
    assert exc_info.value.value == value


def test_bad_interval_is_validation_error():
    with pytest.raises(ValidationError):
        parse_duration("soon")


def test_format_duration():
    assert format_duration(timedelta(minutes=1)) == "1m0s"
    assert format_duration(timedelta(seconds=30)) == "30s"
    assert format_duration(timedelta(hours=1, minutes=30)) == "1h30m0s"
    assert format_duration(timedelta(milliseconds=500)) == "500ms"


def test_huge_interval_is_rejected():
    with pytest.raises(BadIntervalError, match="interval too large"):
        parse_duration("100000000000h")
