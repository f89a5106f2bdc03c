from functools import lru_cache

from muhurat_finder.config import Settings, get_settings
from muhurat_finder.services.astrology.geo import GeoConfig
from muhurat_finder.services.ephemeris.provider import EphemerisProvider
from muhurat_finder.services.ephemeris.subprocess_provider import (
    SubprocessEphemerisProvider,
    default_worker_command,
)


def build_ephemeris_provider(settings: Settings) -> EphemerisProvider:
    if settings.EPHEMERIS_BACKEND == "subprocess":
        return SubprocessEphemerisProvider(
            command=default_worker_command(settings.EPHEMERIS_WORKER_PYTHON),
            timeout_sec=settings.EPHEMERIS_TIMEOUT_SEC,
        )
    # Imported lazily so the subprocess backend never loads the native library
    from muhurat_finder.services.ephemeris.swisseph_provider import SwissEphemerisProvider

    return SwissEphemerisProvider(settings.SWISSEPH_EPHE_PATH)


@lru_cache(maxsize=1)
def get_ephemeris_provider() -> EphemerisProvider:
    return build_ephemeris_provider(get_settings())


def get_geo_config() -> GeoConfig:
    settings = get_settings()
    return GeoConfig(
        user_agent=settings.GEOCODER_USER_AGENT,
        timeout_sec=settings.GEOCODER_TIMEOUT_SEC,
    )
