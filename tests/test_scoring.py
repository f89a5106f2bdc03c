import datetime

import pytest

from conftest import FakeEphemerisProvider
from muhurat_finder.services.astrology.timeconv import localize
from muhurat_finder.services.muhurat.config.settings import EVENT_CATEGORIES
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import BirthProfile, EventCategory
from muhurat_finder.services.muhurat.utils.scoring import (
    clamp_score,
    compute_score,
    describe,
    score,
    score_phase_alignment,
)

ASHTAMI_ONLY = EventCategory(key="custom", name="Custom", favorable_tithi=frozenset({8}))
SEPTEMBER_BIRTH = BirthProfile(date=datetime.date(1991, 9, 2), location="Chennai")


def test_everything_favorable_is_clamped():
    # Wednesday, favorable tithi, Rohini, month not in phase
    breakdown = compute_score(8, 2, "Rohini", 10, ASHTAMI_ONLY, SEPTEMBER_BIRTH)
    assert breakdown.raw == 110
    assert breakdown.score == 100
    assert len(breakdown.reasons) == 3


def test_nothing_favorable_is_base_score():
    breakdown = compute_score(3, 5, "Bharani", 10, ASHTAMI_ONLY, SEPTEMBER_BIRTH)
    assert breakdown.raw == 50
    assert breakdown.score == 50
    assert breakdown.reasons == []


@pytest.mark.parametrize(
    "month,birth_month,points",
    [(3, 3, 10), (9, 3, 10), (1, 7, 10), (4, 3, 0), (12, 1, 0)],
)
def test_phase_alignment(month, birth_month, points):
    assert score_phase_alignment(month, birth_month) == points


@pytest.mark.parametrize("raw,expected", [(-20, 10), (10, 10), (64, 64), (135, 100)])
def test_clamp(raw, expected):
    assert clamp_score(raw) == expected


@pytest.mark.parametrize(
    "value,label",
    [(100, "Exceptionally auspicious"), (86, "Exceptionally auspicious"), (85, "Highly favorable"), (75, "Auspicious")],
)
def test_describe(value, label):
    assert describe(value) == label


def test_weekday_bonus_table():
    wedding = EVENT_CATEGORIES["wedding"]
    base = compute_score(2, 5, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score
    assert compute_score(2, 0, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score == base + 15
    assert compute_score(2, 1, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score == base
    assert compute_score(2, 2, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score == base + 20
    assert compute_score(2, 3, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score == base + 10
    assert compute_score(2, 4, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score == base + 15
    assert compute_score(2, 6, "Ardra", 4, wedding, SEPTEMBER_BIRTH).score == base


def test_score_from_provider_is_deterministic(fake_provider):
    instant = localize(datetime.date(2026, 10, 21), datetime.time(10, 15), "Asia/Kolkata")
    first = score(instant, ASHTAMI_ONLY, SEPTEMBER_BIRTH, fake_provider)
    assert first == 100
    assert score(instant, ASHTAMI_ONLY, SEPTEMBER_BIRTH, fake_provider) == first


def test_weekday_is_read_in_local_time():
    # 01:00 IST on a Wednesday is still Tuesday in UTC
    provider = FakeEphemerisProvider(longitudes={"Moon": 0.0})
    instant = localize(datetime.date(2026, 10, 21), datetime.time(1, 0), "Asia/Kolkata")
    assert score(instant, ASHTAMI_ONLY, SEPTEMBER_BIRTH, provider) == 70
    assert score(instant.astimezone(datetime.timezone.utc), ASHTAMI_ONLY, SEPTEMBER_BIRTH, provider) == 50
