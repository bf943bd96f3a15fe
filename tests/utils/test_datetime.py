"""Tests for the application timezone helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from dispatch.utils import ensure_app_naive_datetime, ensure_app_timezone
from dispatch.utils.datetime import _fixed_offset


@pytest.mark.parametrize(
    ("name", "hours"),
    [("UTC+02:00", 2), ("GMT-0500", -5), ("utc+2", 2), ("UTC-11", -11)],
)
def test_fixed_offsets(name, hours):
    assert _fixed_offset(name).utcoffset(None) == timedelta(hours=hours)


@pytest.mark.parametrize("name", ["Mars/Olympus", "UTC+xx", "CET+1"])
def test_unparseable_offsets(name):
    assert _fixed_offset(name) is None


def test_storage_conversion_uses_app_timezone():
    aware = datetime(2024, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

    stored = ensure_app_naive_datetime(aware)

    assert stored == datetime(2024, 3, 1, 12, 0)
    assert ensure_app_timezone(stored) == aware
    assert ensure_app_naive_datetime(None) is None
