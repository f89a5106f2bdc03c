from __future__ import annotations

import datetime
import logging
from typing import List, Tuple

from muhurat_finder.services.astrology.schemas import GeoPosition
from muhurat_finder.services.astrology.snapshot import build_snapshot
from muhurat_finder.services.astrology.timeconv import localize
from muhurat_finder.services.ephemeris.provider import EphemerisProvider
from muhurat_finder.services.errors import EphemerisUnavailable, InvertedDayWindow
from muhurat_finder.services.muhurat.config.settings import (
    APPROXIMATE_SUNRISE,
    APPROXIMATE_SUNSET,
    MUHURTA_COUNT,
    MUHURTA_NAMES,
)
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import (
    DayMuhurtas,
    MuhurtaInterval,
    TimeWindow,
)
from muhurat_finder.services.muhurat.utils.kalam import overlaps, rahu_kalam_window
from muhurat_finder.services.muhurat.utils.qualities import muhurta_quality

logger = logging.getLogger(__name__)

Interval = Tuple[datetime.datetime, datetime.datetime]


def partition_day(
    sunrise: datetime.datetime,
    sunset: datetime.datetime,
    count: int = MUHURTA_COUNT,
) -> List[Interval]:
    """
    Split [sunrise, sunset) into `count` contiguous equal intervals.

    Boundaries are computed from sunrise each time (not accumulated) and the
    last interval ends exactly at sunset.
    """
    if sunset <= sunrise:
        raise InvertedDayWindow(
            f"sunset ({sunset.isoformat()}) is not after sunrise ({sunrise.isoformat()})"
        )
    duration = sunset - sunrise
    bounds = [sunrise + duration * i / count for i in range(count)] + [sunset]
    return [(bounds[i], bounds[i + 1]) for i in range(count)]


def _daylight(
    provider: EphemerisProvider,
    day: datetime.date,
    geo: GeoPosition,
    tz_name: str,
    allow_approximate: bool,
) -> Tuple[datetime.datetime, datetime.datetime, str]:
    try:
        sunrise, sunset = provider.sun_rise_set(day, geo, tz_name)
        return sunrise, sunset, "ephemeris"
    except EphemerisUnavailable as exc:
        if not allow_approximate:
            raise
        logger.warning(
            "Sunrise/sunset unavailable for %s at (%s, %s), using approximate %s-%s: %s",
            day, geo.latitude, geo.longitude, APPROXIMATE_SUNRISE, APPROXIMATE_SUNSET, exc,
        )
        return (
            localize(day, APPROXIMATE_SUNRISE, tz_name),
            localize(day, APPROXIMATE_SUNSET, tz_name),
            "approximate",
        )


def compute_day_muhurtas(
    provider: EphemerisProvider,
    day: datetime.date,
    geo: GeoPosition,
    tz_name: str,
    allow_approximate: bool = False,
) -> DayMuhurtas:
    """
    The fifteen daytime muhurtas of `day` at `geo`.

    Tithi, yoga and nakshatra are taken at each interval's midpoint. When
    `allow_approximate` is set and the provider cannot give sunrise/sunset,
    06:00-18:00 local is used and the result is marked "approximate".
    """
    sunrise, sunset, source = _daylight(provider, day, geo, tz_name, allow_approximate)
    intervals = partition_day(sunrise, sunset)

    weekday = day.weekday()
    rahu = rahu_kalam_window(sunrise, sunset, weekday)

    muhurtas = []
    for i, (start, end) in enumerate(intervals):
        ordinal = i + 1
        midpoint = start + (end - start) / 2
        snapshot = build_snapshot(provider, midpoint, geo)
        in_rahu = overlaps(start, end, rahu)
        quality, rule = muhurta_quality(ordinal, weekday, snapshot.tithi.number, in_rahu)
        muhurtas.append(
            MuhurtaInterval(
                number=ordinal,
                name=MUHURTA_NAMES[i],
                start=start,
                end=end,
                quality=quality,
                quality_rule=rule,
                in_rahu_kalam=in_rahu,
                tithi=snapshot.tithi,
                yoga=snapshot.yoga,
                nakshatra=snapshot.nakshatra,
            )
        )

    return DayMuhurtas(
        date=day,
        timezone=tz_name,
        geo=geo,
        sunrise=sunrise,
        sunset=sunset,
        day_length_hours=round((sunset - sunrise).total_seconds() / 3600.0, 4),
        daylight_source=source,
        rahu_kalam=TimeWindow(start=rahu[0], end=rahu[1]),
        muhurtas=muhurtas,
    )
