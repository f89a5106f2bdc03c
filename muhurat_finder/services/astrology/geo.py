from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from geopy.geocoders import Nominatim
from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from timezonefinder import TimezoneFinder

from .schemas import GeoPosition, LocationInput, ResolvedLocation

logger = logging.getLogger(__name__)


@dataclass
class GeoConfig:
    user_agent: str
    timeout_sec: float
    retries: int = 3


class LocationNotFound(ValueError):
    pass


def get_timezone(lat: float, lon: float) -> str:
    tf = TimezoneFinder()
    tz = tf.timezone_at(lat=lat, lng=lon)
    if not tz:
        raise LocationNotFound("Could not determine timezone from lat/lon")
    return tz


def geocode_place(place: str, cfg: GeoConfig) -> Tuple[float, float]:
    """
    Online geocoding (Nominatim). Each retry doubles the timeout.
    """
    geolocator = Nominatim(user_agent=cfg.user_agent)

    last_exc: Optional[Exception] = None
    timeout = cfg.timeout_sec
    for _ in range(max(cfg.retries, 1)):
        try:
            loc = geolocator.geocode(place, timeout=timeout, addressdetails=False)
        except (GeocoderUnavailable, GeocoderTimedOut, GeocoderServiceError) as e:
            logger.warning("Geocoding %r failed (timeout=%.1fs): %s", place, timeout, e)
            last_exc = e
            timeout *= 2
            continue
        if not loc:
            raise LocationNotFound(f"Could not geocode place: {place}")
        return float(loc.latitude), float(loc.longitude)

    raise LocationNotFound(f"Geocoding failed after retries: {place}. Last error: {last_exc}")


def compose_place_string(loc: LocationInput) -> str:
    # Prefer explicit place; else compose city/state/country
    place = (loc.place or "").strip()
    if place:
        return place
    parts = [(p or "").strip() for p in (loc.city, loc.state, loc.country)]
    return ", ".join(p for p in parts if p)


def resolve_location(loc: LocationInput, cfg: GeoConfig) -> ResolvedLocation:
    """
    Resolve a LocationInput to lat/lon/timezone.
    Lat/lon inputs never touch the network; place inputs are geocoded.
    """
    if loc.latitude is not None and loc.longitude is not None:
        lat, lon = loc.latitude, loc.longitude
        label = loc.label or compose_place_string(loc) or None
    else:
        place = compose_place_string(loc)
        lat, lon = geocode_place(place, cfg)
        label = loc.label or place

    tz = loc.timezone or get_timezone(lat, lon)
    return ResolvedLocation(
        geo=GeoPosition(latitude=lat, longitude=lon, altitude=loc.altitude),
        timezone=tz,
        label=label,
    )
