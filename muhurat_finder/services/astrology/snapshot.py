from __future__ import annotations

import datetime as _dt
import logging
import math
from typing import Dict, Optional

from muhurat_finder.services.astrology.astrology_engine import (
    degrees_in_sign,
    get_pada,
    karana,
    nakshatra,
    nakshatra_index,
    normalize_longitude,
    tithi,
    yoga,
    zodiac_sign,
    NAKSHATRA_LIST,
)
from muhurat_finder.services.astrology.schemas import (
    BodyPosition,
    GeoPosition,
    PositionSnapshot,
)
from muhurat_finder.services.astrology.timeconv import to_julian_day
from muhurat_finder.services.ephemeris.provider import ROSTER, EphemerisProvider
from muhurat_finder.services.errors import (
    EphemerisUnavailable,
    InvalidAngle,
    PartialSnapshotFailure,
)

logger = logging.getLogger(__name__)


def body_position(body: str, longitude: float, derived: bool = False) -> BodyPosition:
    lon = normalize_longitude(longitude)
    sign_index, sign = zodiac_sign(lon)
    nak_index = nakshatra_index(lon)
    return BodyPosition(
        body=body,
        longitude=lon,
        sign_index=sign_index,
        sign=sign,
        degrees_in_sign=degrees_in_sign(lon),
        nakshatra_index=nak_index,
        nakshatra=NAKSHATRA_LIST[nak_index],
        pada=get_pada(lon),
        derived=derived,
    )


def build_snapshot(
    provider: EphemerisProvider,
    instant: _dt.datetime,
    geo: Optional[GeoPosition] = None,
) -> PositionSnapshot:
    """
    Positions of the whole roster at one instant.

    All bodies come from a single provider call so the Sun and Moon used for
    tithi/yoga share the same instant. Either every body is present or the
    snapshot fails; nothing is patched in.
    """
    jd = to_julian_day(instant)

    try:
        raw = provider.body_longitudes(instant, ROSTER, geo)
    except EphemerisUnavailable:
        raise
    except (OSError, RuntimeError, ValueError) as exc:
        logger.warning("Ephemeris provider %s failed at %s: %s", provider.name, instant.isoformat(), exc)
        raise EphemerisUnavailable(f"{provider.name} provider failed: {exc}") from exc

    missing = [body for body in ROSTER if body not in raw]
    if missing:
        raise PartialSnapshotFailure(
            f"{provider.name} provider returned no longitude for {', '.join(missing)}"
        )

    positions: Dict[str, BodyPosition] = {}
    for body in ROSTER:
        value = raw[body]
        try:
            lon = float(value)
            if not math.isfinite(lon):
                raise InvalidAngle(f"non-finite longitude {lon!r}")
            positions[body] = body_position(body, lon)
        except (TypeError, ValueError) as exc:
            raise PartialSnapshotFailure(f"{provider.name} provider returned {value!r} for {body}") from exc

    # Ketu sits opposite Rahu
    positions["Ketu"] = body_position("Ketu", positions["Rahu"].longitude + 180.0, derived=True)

    sun_lon = positions["Sun"].longitude
    moon_lon = positions["Moon"].longitude
    return PositionSnapshot(
        instant=instant,
        julian_day=jd,
        geo=geo,
        provider=provider.name,
        positions=positions,
        tithi=tithi(sun_lon, moon_lon),
        yoga=yoga(sun_lon, moon_lon),
        nakshatra=nakshatra(moon_lon),
        karana=karana(sun_lon, moon_lon),
    )
