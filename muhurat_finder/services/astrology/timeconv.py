"""
Calendar instant <-> Julian Day conversion.

The engine keeps time as tz-aware datetimes in the proleptic Gregorian
calendar and hands Julian Days (UT) to the ephemeris. The conversion goes
through the Unix epoch so it needs no native library.
"""
from __future__ import annotations

import datetime as _dt
import math

import pytz

from muhurat_finder.services.errors import InvalidInstant

UNIX_EPOCH_JD = 2440587.5
SECONDS_PER_DAY = 86400.0

_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=pytz.UTC)


def to_julian_day(dt: _dt.datetime) -> float:
    if not isinstance(dt, _dt.datetime):
        raise InvalidInstant(f"expected a datetime, got {type(dt).__name__}")
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise InvalidInstant(f"datetime must be timezone-aware: {dt.isoformat()}")
    delta = dt.astimezone(pytz.UTC) - _EPOCH
    return UNIX_EPOCH_JD + delta.total_seconds() / SECONDS_PER_DAY


def from_julian_day(jd: float, tz: _dt.tzinfo | str | None = None) -> _dt.datetime:
    """
    Inverse of to_julian_day, rounded to the nearest second.
    `tz` may be a tzinfo or an IANA name; defaults to UTC.
    """
    try:
        jd = float(jd)
    except (TypeError, ValueError) as exc:
        raise InvalidInstant(f"Julian Day is not a number: {jd!r}") from exc
    if not math.isfinite(jd):
        raise InvalidInstant(f"Julian Day is not finite: {jd!r}")

    seconds = round((jd - UNIX_EPOCH_JD) * SECONDS_PER_DAY)
    try:
        utc = _EPOCH + _dt.timedelta(seconds=seconds)
    except OverflowError as exc:
        raise InvalidInstant(f"Julian Day out of calendar range: {jd!r}") from exc

    if tz is None:
        return utc
    if isinstance(tz, str):
        tz = get_timezone(tz)
    return utc.astimezone(tz)


def get_timezone(tz_name: str) -> _dt.tzinfo:
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError as exc:
        raise InvalidInstant(f"Unknown timezone: {tz_name!r}") from exc


def localize(day: _dt.date, clock: _dt.time, tz_name: str) -> _dt.datetime:
    """Attach a pytz zone to local wall-clock fields."""
    tz = get_timezone(tz_name)
    naive = _dt.datetime.combine(day, clock.replace(tzinfo=None))
    return tz.localize(naive)


def local_midnight(day: _dt.date, tz_name: str) -> _dt.datetime:
    return localize(day, _dt.time(0, 0), tz_name)
