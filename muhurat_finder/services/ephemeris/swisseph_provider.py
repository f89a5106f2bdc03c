from __future__ import annotations

import datetime as _dt
import logging
import threading
from typing import Dict, Iterable, Optional, Tuple

import swisseph as swe

from muhurat_finder.services.astrology.schemas import GeoPosition
from muhurat_finder.services.astrology.timeconv import (
    from_julian_day,
    local_midnight,
    to_julian_day,
)
from muhurat_finder.services.ephemeris.provider import EphemerisProvider, check_body
from muhurat_finder.services.errors import EphemerisUnavailable, InvertedDayWindow

logger = logging.getLogger(__name__)

BODY_IDS: Dict[str, int] = {
    "Sun": swe.SUN,
    "Moon": swe.MOON,
    "Mercury": swe.MERCURY,
    "Venus": swe.VENUS,
    "Mars": swe.MARS,
    "Jupiter": swe.JUPITER,
    "Saturn": swe.SATURN,
    "Rahu": swe.MEAN_NODE,
}

# swe.rise_trans status when the body never crosses the horizon that day
CIRCUMPOLAR = -2


class SwissEphemerisProvider(EphemerisProvider):
    """
    In-process provider backed by pyswisseph.

    Falls back to the built-in Moshier ephemeris when the Swiss data files
    are not available. The library keeps global state (ephemeris path,
    topocentric observer) so every call is serialized.
    """

    name = "swisseph"

    def __init__(self, ephe_path: Optional[str] = None):
        self._lock = threading.Lock()
        path = (ephe_path or "").strip()
        swe.set_ephe_path(path if path else None)
        logger.debug("Swiss Ephemeris path set to %r", path or "<built-in>")

    # -----------------------
    # LONGITUDES
    # -----------------------
    def _calc(self, jd_ut: float, body: str, geo: Optional[GeoPosition]) -> float:
        body_id = BODY_IDS[check_body(body)]
        base_flags = 0
        if geo is not None:
            swe.set_topo(geo.longitude, geo.latitude, geo.altitude)
            base_flags |= swe.FLG_TOPOCTR

        try:
            pos, _flag = swe.calc_ut(jd_ut, body_id, base_flags | swe.FLG_SWIEPH)
        except swe.Error:
            # No ephemeris files: Moshier needs none
            try:
                pos, _flag = swe.calc_ut(jd_ut, body_id, base_flags | swe.FLG_MOSEPH)
            except swe.Error as exc:
                logger.warning("swisseph failed for %s at JD %.6f: %s", body, jd_ut, exc)
                raise EphemerisUnavailable(f"swisseph failed for {body}: {exc}") from exc
        return float(pos[0]) % 360.0

    def body_longitude(
        self,
        instant: _dt.datetime,
        body: str,
        geo: Optional[GeoPosition] = None,
    ) -> float:
        jd = to_julian_day(instant)
        with self._lock:
            return self._calc(jd, body, geo)

    def body_longitudes(
        self,
        instant: _dt.datetime,
        bodies: Iterable[str],
        geo: Optional[GeoPosition] = None,
    ) -> Dict[str, float]:
        jd = to_julian_day(instant)
        with self._lock:
            return {body: self._calc(jd, body, geo) for body in bodies}

    # -----------------------
    # SUNRISE / SUNSET
    # -----------------------
    def _rise_or_set(self, jd_start: float, event: int, geo: GeoPosition) -> float:
        geopos = (geo.longitude, geo.latitude, geo.altitude)
        try:
            status, tret = swe.rise_trans(jd_start, swe.SUN, event, geopos, 0.0, 0.0, swe.FLG_SWIEPH)
        except swe.Error as exc:
            logger.warning("swisseph rise_trans failed at JD %.6f: %s", jd_start, exc)
            raise EphemerisUnavailable(f"swisseph rise/set failed: {exc}") from exc

        if status == CIRCUMPOLAR:
            raise InvertedDayWindow(
                f"Sun does not rise or set at lat={geo.latitude}, lon={geo.longitude}"
            )
        if status != 0 or not tret or not tret[0]:
            raise EphemerisUnavailable(f"swisseph rise/set returned status {status}")
        return float(tret[0])

    def sun_rise_set(
        self,
        day: _dt.date,
        geo: GeoPosition,
        tz_name: str,
    ) -> Tuple[_dt.datetime, _dt.datetime]:
        start_jd = to_julian_day(local_midnight(day, tz_name))
        with self._lock:
            rise_jd = self._rise_or_set(start_jd, swe.CALC_RISE, geo)
            set_jd = self._rise_or_set(rise_jd, swe.CALC_SET, geo)
        return from_julian_day(rise_jd, tz_name), from_julian_day(set_jd, tz_name)
