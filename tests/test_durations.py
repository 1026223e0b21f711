"""Tests for Go-style duration parsing (utils/durations.py)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from pvsadm.exceptions import InvalidOptionError
from pvsadm.utils.durations import parse_duration


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0", timedelta(0)),
        ("", timedelta(0)),
        ("72h", timedelta(hours=72)),
        ("45m", timedelta(minutes=45)),
        ("10s", timedelta(seconds=10)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5h", timedelta(minutes=90)),
        ("250ms", timedelta(milliseconds=250)),
        (" 2h ", timedelta(hours=2)),
    ],
)
def test_valid(text: str, expected: timedelta) -> None:
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["3d", "h", "10", "1h junk", "-1h", "1h-30m"])
def test_invalid(text: str) -> None:
    with pytest.raises(InvalidOptionError, match="Invalid duration"):
        parse_duration(text)
