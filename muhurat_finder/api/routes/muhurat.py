import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from muhurat_finder.api.dependencies import get_ephemeris_provider, get_geo_config
from muhurat_finder.config import get_settings
from muhurat_finder.services.astrology.geo import GeoConfig, resolve_location
from muhurat_finder.services.astrology.schemas import PositionSnapshot
from muhurat_finder.services.astrology.snapshot import build_snapshot
from muhurat_finder.services.astrology.timeconv import localize
from muhurat_finder.services.ephemeris.provider import EphemerisProvider
from muhurat_finder.services.errors import (
    EphemerisUnavailable,
    InvertedDayWindow,
    MuhuratError,
    UnknownEventCategory,
)
from muhurat_finder.services.muhurat.config.settings import EVENT_CATEGORIES
from muhurat_finder.services.muhurat.engine.daylight import compute_day_muhurtas
from muhurat_finder.services.muhurat.engine.muhurat_engine import rank_muhurats
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import (
    DayMuhurtas,
    DayMuhurtasRequest,
    EventCategoryItem,
    MuhuratRankRequest,
    PositionsRequest,
    RankingResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/muhurat", tags=["Muhurat"])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, UnknownEventCategory):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvertedDayWindow):
        return HTTPException(
            status_code=422,
            detail=f"Cannot compute muhurtas for this location/date: {exc}",
        )
    if isinstance(exc, EphemerisUnavailable):
        return HTTPException(status_code=503, detail=f"Ephemeris unavailable: {exc}")
    return HTTPException(status_code=400, detail=str(exc))


@router.get("/categories", response_model=List[EventCategoryItem])
def muhurat_categories():
    return [
        EventCategoryItem(key=c.key, name=c.name, favorable_tithi=sorted(c.favorable_tithi))
        for c in EVENT_CATEGORIES.values()
    ]


@router.post("/rank", response_model=RankingResult)
def muhurat_rank(
    payload: MuhuratRankRequest,
    provider: EphemerisProvider = Depends(get_ephemeris_provider),
):
    try:
        return rank_muhurats(
            payload.birth_profile,
            payload.event_category,
            provider,
            today=payload.today,
            horizon_days=payload.horizon_days,
            min_score=payload.min_score,
            top_n=payload.top_n,
            tz_name=payload.timezone,
        )
    except (MuhuratError, ValueError) as e:
        logger.warning("Ranking %r failed: %s", payload.event_category, e)
        raise _http_error(e) from e


@router.post("/day", response_model=DayMuhurtas)
def muhurat_day(
    payload: DayMuhurtasRequest,
    provider: EphemerisProvider = Depends(get_ephemeris_provider),
    geo_cfg: GeoConfig = Depends(get_geo_config),
):
    try:
        location = resolve_location(payload.location, geo_cfg)
        return compute_day_muhurtas(
            provider,
            payload.date,
            location.geo,
            location.timezone,
            allow_approximate=get_settings().ALLOW_APPROXIMATE_DAYLIGHT,
        )
    except (MuhuratError, ValueError) as e:
        logger.warning("Day muhurtas for %s failed: %s", payload.date, e)
        raise _http_error(e) from e


@router.post("/positions", response_model=PositionSnapshot)
def muhurat_positions(
    payload: PositionsRequest,
    provider: EphemerisProvider = Depends(get_ephemeris_provider),
    geo_cfg: GeoConfig = Depends(get_geo_config),
):
    try:
        geo = None
        tz_name = payload.timezone
        if payload.location is not None:
            location = resolve_location(payload.location, geo_cfg)
            geo = location.geo
            tz_name = tz_name or location.timezone
        instant = localize(payload.date, payload.time, tz_name or get_settings().DEFAULT_TIMEZONE)
        return build_snapshot(provider, instant, geo)
    except (MuhuratError, ValueError) as e:
        raise _http_error(e) from e
