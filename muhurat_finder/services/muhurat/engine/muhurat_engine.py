from __future__ import annotations

import datetime
import logging
import threading
from typing import Iterator, List, Optional, Union

from muhurat_finder.config import get_settings
from muhurat_finder.services.astrology.schemas import GeoPosition
from muhurat_finder.services.astrology.snapshot import build_snapshot
from muhurat_finder.services.astrology.timeconv import get_timezone, localize
from muhurat_finder.services.ephemeris.provider import EphemerisProvider
from muhurat_finder.services.errors import RankingCancelled, UnknownEventCategory
from muhurat_finder.services.muhurat.config.settings import (
    CANONICAL_SLOTS,
    EVENT_CATEGORIES,
    HORIZON_DAYS,
    RANK_MIN_SCORE,
    TOP_N,
)
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import (
    BirthProfile,
    EventCategory,
    RankingMeta,
    RankingResult,
    ScoredCandidate,
)
from muhurat_finder.services.muhurat.utils.scoring import (
    WEEKDAY_NAMES,
    describe,
    score_snapshot,
)

logger = logging.getLogger(__name__)


def _date_range(start: datetime.date, days: int):
    for offset in range(days):
        yield start + datetime.timedelta(days=offset)


def resolve_event_category(event_category: Union[str, EventCategory]) -> EventCategory:
    if isinstance(event_category, EventCategory):
        return event_category
    key = str(event_category).strip().lower()
    try:
        return EVENT_CATEGORIES[key]
    except KeyError:
        raise UnknownEventCategory(key) from None


def _check_params(horizon_days: int, min_score: int, top_n: Optional[int]) -> None:
    if horizon_days < 1:
        raise ValueError("horizon_days must be >= 1")
    if not 0 <= min_score <= 100:
        raise ValueError("min_score must be within 0-100")
    if top_n is not None and top_n < 1:
        raise ValueError("top_n must be >= 1")


def evaluate_day(
    day: datetime.date,
    category: EventCategory,
    profile: BirthProfile,
    provider: EphemerisProvider,
    tz_name: str,
    geo: Optional[GeoPosition] = None,
) -> ScoredCandidate:
    """
    Score every canonical slot of `day` and keep the best one.

    Ties go to the earliest slot, so the choice is a pure function of the
    inputs.
    """
    best = None
    for slot in CANONICAL_SLOTS:
        instant = localize(day, slot, tz_name)
        snapshot = build_snapshot(provider, instant, geo)
        breakdown = score_snapshot(snapshot, category, profile)
        if best is None or breakdown.score > best[1].score:
            best = (slot, breakdown, snapshot)

    slot, breakdown, snapshot = best
    tithi = snapshot.tithi
    nak = snapshot.nakshatra
    details = (
        f"{nak.name} nakshatra (pada {nak.pada}), Tithi {tithi.number} "
        f"({tithi.name}, {tithi.paksha} paksha), {snapshot.yoga.name} yoga. "
        f"Planetary alignment favorable for {category.name.lower()}."
    )
    return ScoredCandidate(
        date=day,
        time=slot,
        datetime_local=snapshot.instant,
        event_category=category.key,
        score=breakdown.score,
        description=describe(breakdown.score),
        weekday=WEEKDAY_NAMES[day.weekday()],
        tithi=tithi,
        nakshatra=nak,
        yoga=snapshot.yoga,
        reasons=breakdown.reasons,
        details=details,
    )


def iter_candidates(
    birth_profile: BirthProfile,
    event_category: Union[str, EventCategory],
    provider: EphemerisProvider,
    *,
    today: Optional[datetime.date] = None,
    horizon_days: int = HORIZON_DAYS,
    min_score: int = RANK_MIN_SCORE,
    tz_name: Optional[str] = None,
    geo: Optional[GeoPosition] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Iterator[ScoredCandidate]:
    """
    Lazily yield qualifying candidates in date order.

    Every call starts again from `today`; nothing is carried between calls.
    Cancellation is checked between days, never in the middle of one.
    """
    category = resolve_event_category(event_category)
    _check_params(horizon_days, min_score, None)
    tz_name = tz_name or get_settings().DEFAULT_TIMEZONE
    if today is None:
        today = datetime.datetime.now(get_timezone(tz_name)).date()

    for day in _date_range(today, horizon_days):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Muhurat scan cancelled before %s", day)
            raise RankingCancelled(f"ranking cancelled before {day.isoformat()}")
        candidate = evaluate_day(day, category, birth_profile, provider, tz_name, geo)
        if candidate.score >= min_score:
            yield candidate


def rank_muhurats(
    birth_profile: BirthProfile,
    event_category: Union[str, EventCategory],
    provider: EphemerisProvider,
    *,
    today: Optional[datetime.date] = None,
    horizon_days: int = HORIZON_DAYS,
    min_score: int = RANK_MIN_SCORE,
    top_n: int = TOP_N,
    tz_name: Optional[str] = None,
    geo: Optional[GeoPosition] = None,
    cancel_event: Optional[threading.Event] = None,
) -> RankingResult:
    """
    Muhurat Ranking Engine

    - Walks [today, today + horizon_days) in the caller's timezone
    - Scores the canonical slots of each day, keeps the best slot
    - Drops days below min_score
    - Higher score first; tie-breaker earliest date/time
    - Ephemeris failures propagate: no partial or made-up list is returned
    """
    category = resolve_event_category(event_category)
    _check_params(horizon_days, min_score, top_n)
    tz_name = tz_name or get_settings().DEFAULT_TIMEZONE
    if today is None:
        today = datetime.datetime.now(get_timezone(tz_name)).date()

    results: List[ScoredCandidate] = list(
        iter_candidates(
            birth_profile,
            category,
            provider,
            today=today,
            horizon_days=horizon_days,
            min_score=min_score,
            tz_name=tz_name,
            geo=geo,
            cancel_event=cancel_event,
        )
    )
    results.sort(key=lambda c: (-c.score, c.date, c.time))

    logger.info(
        "Ranked %d/%d days for %s from %s (provider=%s)",
        len(results), horizon_days, category.key, today, provider.name,
    )
    return RankingResult(
        event_category=category.key,
        candidates=results[:top_n],
        meta=RankingMeta(
            today=today,
            horizon_days=horizon_days,
            min_score=min_score,
            top_n=top_n,
            timezone=tz_name,
            ephemeris=provider.name,
            days_scanned=horizon_days,
            candidates_found=len(results),
        ),
    )
