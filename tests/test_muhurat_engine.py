import datetime
import threading

import pytest

from conftest import FakeEphemerisProvider
from muhurat_finder.services.errors import (
    EphemerisUnavailable,
    RankingCancelled,
    UnknownEventCategory,
)
from muhurat_finder.services.muhurat.config.settings import EVENT_CATEGORIES
from muhurat_finder.services.muhurat.engine.muhurat_engine import (
    evaluate_day,
    iter_candidates,
    rank_muhurats,
    resolve_event_category,
)
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import BirthProfile

TZ = "Asia/Kolkata"
TODAY = datetime.date(2026, 10, 19)  # Monday
MAY_BIRTH = BirthProfile(date=datetime.date(1993, 5, 8), location="Jaipur")


def _rank(provider, **kwargs):
    params = dict(today=TODAY, horizon_days=14, min_score=60, top_n=5, tz_name=TZ)
    params.update(kwargs)
    return rank_muhurats(MAY_BIRTH, "travel", provider, **params)


def test_rank_orders_by_score_then_date(fake_provider):
    result = _rank(fake_provider)
    dates = [c.date.day for c in result.candidates]
    assert dates == [19, 21, 22, 23, 26]
    assert all(c.score == 100 for c in result.candidates)
    assert result.candidates[0].description == "Exceptionally auspicious"
    assert result.meta.candidates_found == 14
    assert result.meta.ephemeris == "fake"
    assert result.status == "success"


def test_rank_is_idempotent(fake_provider):
    assert _rank(fake_provider) == _rank(fake_provider)


def test_min_score_and_top_n(fake_provider):
    result = _rank(fake_provider, min_score=95, top_n=20)
    assert result.meta.candidates_found == 9
    assert len(result.candidates) == 9
    assert all(c.score >= 95 for c in result.candidates)
    scores = [c.score for c in result.candidates]
    assert scores == sorted(scores, reverse=True)


def test_nothing_qualifies(fake_provider):
    result = rank_muhurats(MAY_BIRTH, "wedding", fake_provider, today=TODAY, horizon_days=7, min_score=100, tz_name=TZ)
    # wedding does not favor tithi 8: at most 50 + 20 + 15
    assert result.candidates == []
    assert result.meta.candidates_found == 0


def test_best_slot_is_kept():
    def moon(instant):
        return 45.0 if instant.hour == 10 else 0.0

    provider = FakeEphemerisProvider(longitudes={"Moon": moon})
    candidate = evaluate_day(datetime.date(2026, 10, 20), EVENT_CATEGORIES["travel"], MAY_BIRTH, provider, TZ)
    assert candidate.time == datetime.time(10, 15)
    assert candidate.nakshatra.name == "Rohini"
    assert candidate.weekday == "Tuesday"
    assert candidate.datetime_local.hour == 10


def test_ties_go_to_earliest_slot(fake_provider):
    candidate = evaluate_day(TODAY, EVENT_CATEGORIES["travel"], MAY_BIRTH, fake_provider, TZ)
    assert candidate.time == datetime.time(6, 0)
    assert "Rohini nakshatra" in candidate.details
    assert "favorable for travel" in candidate.details


def test_ephemeris_failure_propagates():
    with pytest.raises(EphemerisUnavailable):
        _rank(FakeEphemerisProvider(fail=True))


def test_partial_failure_propagates():
    with pytest.raises(EphemerisUnavailable):
        _rank(FakeEphemerisProvider(missing={"Jupiter"}))


@pytest.mark.parametrize("key", ["Travel", "  travel ", "TRAVEL"])
def test_category_lookup_is_forgiving(key):
    assert resolve_event_category(key) is EVENT_CATEGORIES["travel"]


def test_unknown_category(fake_provider):
    with pytest.raises(UnknownEventCategory) as excinfo:
        rank_muhurats(MAY_BIRTH, "coronation", fake_provider, today=TODAY)
    assert excinfo.value.key == "coronation"
    assert "coronation" in str(excinfo.value)
    assert not fake_provider.calls


@pytest.mark.parametrize(
    "kwargs",
    [{"horizon_days": 0}, {"min_score": 101}, {"min_score": -1}, {"top_n": 0}],
)
def test_invalid_parameters(fake_provider, kwargs):
    with pytest.raises(ValueError):
        _rank(fake_provider, **kwargs)


def test_cancel_before_start(fake_provider):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(RankingCancelled):
        _rank(fake_provider, cancel_event=cancel)
    assert not fake_provider.calls


def test_cancel_between_days(fake_provider):
    cancel = threading.Event()
    candidates = iter_candidates(MAY_BIRTH, "travel", fake_provider, today=TODAY, horizon_days=14, tz_name=TZ, cancel_event=cancel)
    first = next(candidates)
    assert first.date == TODAY
    cancel.set()
    with pytest.raises(RankingCancelled):
        next(candidates)


def test_iter_candidates_is_lazy(fake_provider):
    candidates = iter_candidates(MAY_BIRTH, "travel", fake_provider, today=TODAY, horizon_days=90, tz_name=TZ)
    assert not fake_provider.calls
    next(candidates)
    # one day's worth of canonical slots
    assert len(fake_provider.calls) == 4
