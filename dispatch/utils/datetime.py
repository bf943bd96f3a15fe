"""Clock and conversion helpers bound to the configured application timezone.

Entities carry aware datetimes. Columns are plain ``DateTime`` so the same
schema runs on SQLite and PostgreSQL; repositories therefore store the
application-local wall time without ``tzinfo`` and re-attach it on read.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dispatch.config import get_settings

_OFFSET_PREFIXES = ("UTC", "GMT")


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the timezone named by ``APP_TIMEZONE``.

    Accepts IANA names (``Africa/Johannesburg``) and fixed offsets written
    as ``UTC+02:00`` or ``GMT-0500``. Unknown values resolve to UTC.
    """

    name = (get_settings().app_timezone or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return _fixed_offset(name) or timezone.utc


def _fixed_offset(name: str) -> tzinfo | None:
    prefix = name[:3].upper()
    if prefix not in _OFFSET_PREFIXES:
        return None
    offset = name[3:]
    if len(offset) <= 3:
        # "+2" or "-11" style hours only
        offset = f"{offset[:1]}{offset[1:].zfill(2)}00"
    try:
        return datetime.strptime(offset, "%z").tzinfo
    except ValueError:
        return None


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Column default: the current local wall time without ``tzinfo``."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert to (aware input) the app timezone."""

    if value is None:
        return None
    app_tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=app_tz)
    return value.astimezone(app_tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the storage form of ``value``: local wall time, no ``tzinfo``."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)
