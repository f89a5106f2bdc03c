"""Shared fixtures: an in-memory ephemeris provider and common profiles."""

from __future__ import annotations

import datetime

import pytest

from muhurat_finder.services.astrology.timeconv import localize
from muhurat_finder.services.ephemeris.provider import EphemerisProvider
from muhurat_finder.services.errors import EphemerisUnavailable
from muhurat_finder.services.muhurat.schemas.muhurat_schemas import BirthProfile

# Sun 315°, Moon 45°: tithi 8 (Shukla Ashtami), Moon in Rohini
DEFAULT_LONGITUDES = {
    "Sun": 315.0,
    "Moon": 45.0,
    "Mercury": 300.0,
    "Venus": 330.0,
    "Mars": 120.0,
    "Jupiter": 95.0,
    "Saturn": 350.0,
    "Rahu": 10.0,
}


class FakeEphemerisProvider(EphemerisProvider):
    """Deterministic stand-in for the Swiss Ephemeris.

    Longitudes may be numbers or callables taking the queried instant.
    """

    name = "fake"

    def __init__(
        self,
        longitudes=None,
        sunrise=datetime.time(6, 0),
        sunset=datetime.time(18, 0),
        fail=False,
        fail_rise_set=False,
        missing=(),
    ):
        self.longitudes = dict(DEFAULT_LONGITUDES)
        self.longitudes.update(longitudes or {})
        self.sunrise = sunrise
        self.sunset = sunset
        self.fail = fail
        self.fail_rise_set = fail_rise_set
        self.missing = set(missing)
        self.calls = []

    def body_longitude(self, instant, body, geo=None):
        if self.fail:
            raise EphemerisUnavailable("fake provider is down")
        value = self.longitudes[body]
        return float(value(instant)) if callable(value) else float(value)

    def body_longitudes(self, instant, bodies, geo=None):
        self.calls.append(instant)
        return {
            body: self.body_longitude(instant, body, geo)
            for body in bodies
            if body not in self.missing
        }

    def sun_rise_set(self, day, geo, tz_name):
        if self.fail or self.fail_rise_set:
            raise EphemerisUnavailable("fake rise/set is down")
        return localize(day, self.sunrise, tz_name), localize(day, self.sunset, tz_name)


@pytest.fixture
def fake_provider():
    return FakeEphemerisProvider()


@pytest.fixture
def birth_profile():
    return BirthProfile(date=datetime.date(1990, 5, 14), time=datetime.time(8, 30), location="Pune, India")
