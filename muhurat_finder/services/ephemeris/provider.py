"""
Ephemeris provider interface.

The muhurat engine only ever talks to an EphemerisProvider. Concrete
providers either link the Swiss Ephemeris in-process or run it in a
worker process; tests plug in their own doubles.
"""
from __future__ import annotations

import datetime as _dt
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple

from muhurat_finder.services.astrology.schemas import GeoPosition

# Fixed roster queried for every snapshot (Rahu is the mean lunar node).
ROSTER = ("Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn", "Rahu")


class EphemerisProvider(ABC):
    name = "abstract"

    @abstractmethod
    def body_longitude(
        self,
        instant: _dt.datetime,
        body: str,
        geo: Optional[GeoPosition] = None,
    ) -> float:
        """Ecliptic longitude of `body` at `instant`, degrees in [0, 360)."""

    def body_longitudes(
        self,
        instant: _dt.datetime,
        bodies: Iterable[str],
        geo: Optional[GeoPosition] = None,
    ) -> Dict[str, float]:
        """
        Longitudes of several bodies at one instant.

        Providers whose transport has a per-call cost override this so a
        whole snapshot is answered by a single request.
        """
        return {body: self.body_longitude(instant, body, geo) for body in bodies}

    @abstractmethod
    def sun_rise_set(
        self,
        day: _dt.date,
        geo: GeoPosition,
        tz_name: str,
    ) -> Tuple[_dt.datetime, _dt.datetime]:
        """Sunrise and the following sunset for the local civil `day`."""


def check_body(body: str) -> str:
    if body not in ROSTER:
        raise ValueError(f"Unsupported body {body!r}; expected one of {', '.join(ROSTER)}")
    return body
