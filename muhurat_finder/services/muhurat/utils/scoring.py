import datetime
from typing import Optional

from muhurat_finder.services.astrology.schemas import GeoPosition, PositionSnapshot
from muhurat_finder.services.astrology.snapshot import build_snapshot
from muhurat_finder.services.ephemeris.provider import EphemerisProvider
from muhurat_finder.services.muhurat.config.settings import (
    AUSPICIOUS_NAKSHATRAS,
    BASE_SCORE,
    DEFAULT_DESCRIPTION,
    DESCRIPTIONS,
    MAX_SCORE,
    MIN_SCORE,
    NAKSHATRA_BONUS,
    PHASE_ALIGNMENT_BONUS,
    PHASE_ALIGNMENT_PERIOD_MONTHS,
    TITHI_BONUS,
    WEEKDAY_BONUS,
)
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import (
    BirthProfile,
    EventCategory,
    ScoreBreakdown,
)

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def score_tithi(tithi_number: int, category: EventCategory) -> int:
    return TITHI_BONUS if tithi_number in category.favorable_tithi else 0


def score_weekday(weekday: int) -> int:
    return WEEKDAY_BONUS.get(weekday, 0)


def score_nakshatra(nakshatra: str) -> int:
    return NAKSHATRA_BONUS if nakshatra in AUSPICIOUS_NAKSHATRAS else 0


def score_phase_alignment(month: int, birth_month: int) -> int:
    aligned = (month - birth_month) % PHASE_ALIGNMENT_PERIOD_MONTHS == 0
    return PHASE_ALIGNMENT_BONUS if aligned else 0


def clamp_score(raw: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, raw))


def describe(score: int) -> str:
    for threshold, label in DESCRIPTIONS:
        if score > threshold:
            return label
    return DEFAULT_DESCRIPTION


def compute_score(
    tithi_number: int,
    weekday: int,
    nakshatra: str,
    month: int,
    category: EventCategory,
    profile: BirthProfile,
) -> ScoreBreakdown:
    """
    Deterministic desirability of a candidate, 10-100.

    `weekday` follows date.weekday() (Monday == 0).
    """
    raw = BASE_SCORE
    reasons = []

    pts = score_tithi(tithi_number, category)
    if pts:
        reasons.append(f"Tithi {tithi_number} is favorable for {category.name.lower()} (+{pts})")
    raw += pts

    pts = score_weekday(weekday)
    if pts:
        reasons.append(f"{WEEKDAY_NAMES[weekday]} (+{pts})")
    raw += pts

    pts = score_nakshatra(nakshatra)
    if pts:
        reasons.append(f"{nakshatra} is an auspicious nakshatra (+{pts})")
    raw += pts

    pts = score_phase_alignment(month, profile.date.month)
    if pts:
        reasons.append(f"Month is in phase with the birth month (+{pts})")
    raw += pts

    return ScoreBreakdown(raw=raw, score=clamp_score(raw), reasons=reasons)


def score_snapshot(
    snapshot: PositionSnapshot,
    category: EventCategory,
    profile: BirthProfile,
) -> ScoreBreakdown:
    local = snapshot.instant
    return compute_score(
        tithi_number=snapshot.tithi.number,
        weekday=local.weekday(),
        nakshatra=snapshot.nakshatra.name,
        month=local.month,
        category=category,
        profile=profile,
    )


def score(
    instant: datetime.datetime,
    category: EventCategory,
    profile: BirthProfile,
    provider: EphemerisProvider,
    geo: Optional[GeoPosition] = None,
) -> int:
    """Score of `instant`; weekday and month are read in the instant's own timezone."""
    snapshot = build_snapshot(provider, instant, geo)
    return score_snapshot(snapshot, category, profile).score
