from __future__ import annotations

import math
from typing import Tuple

from muhurat_finder.services.astrology.schemas import (
    KaranaInfo,
    NakshatraInfo,
    TithiInfo,
    YogaInfo,
)
from muhurat_finder.services.errors import InvalidAngle


# -----------------------
# CONSTANTS
# -----------------------
NAKSHATRA_LIST = (
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira",
    "Ardra", "Punarvasu", "Pushya", "Ashlesha",
    "Magha", "Purva Phalguni", "Uttara Phalguni",
    "Hasta", "Chitra", "Swati", "Vishakha",
    "Anuradha", "Jyeshtha", "Mula",
    "Purva Ashadha", "Uttara Ashadha", "Shravana",
    "Dhanishta", "Shatabhisha", "Purva Bhadrapada",
    "Uttara Bhadrapada", "Revati",
)

ZODIAC_SIGNS = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

TITHI_LIST = (
    "Pratipada", "Dvitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashthi", "Saptami", "Ashtami", "Navami", "Dashami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi", "Purnima",
    "Pratipada", "Dvitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashthi", "Saptami", "Ashtami", "Navami", "Dashami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi", "Amavasya",
)

YOGA_LIST = (
    "Vishkumbha", "Preeti", "Ayushman", "Saubhagya", "Shobhana",
    "Atiganda", "Sukarma", "Dhriti", "Shoola", "Ganda",
    "Vriddhi", "Dhruva", "Vyaghata", "Harshana", "Vajra",
    "Siddhi", "Vyatipata", "Variyana", "Parigha", "Shiva",
    "Siddha", "Sadhya", "Shubha", "Shukla", "Brahma",
    "Indra", "Vaidhriti",
)

# Karana 1 is the fixed Kimstughna, 2..57 cycle the seven movable karanas,
# 58..60 are the remaining fixed ones.
MOVABLE_KARANAS = ("Bava", "Balava", "Kaulava", "Taitila", "Gara", "Vanija", "Vishti")
KARANA_LIST = ("Kimstughna",) + MOVABLE_KARANAS * 8 + ("Shakuni", "Chatushpada", "Naga")

TITHI_SPAN = 12.0
KARANA_SPAN = 6.0
SIGN_SPAN = 30.0
NAKSHATRA_SPAN = 360.0 / 27.0  # 13.333...
PADA_SPAN = NAKSHATRA_SPAN / 4
YOGA_SPAN = 360.0 / 27.0

# Anything larger than this is a unit mix-up rather than an angle.
MAX_SANE_DEGREES = 1.0e6


def _check_angle(value: float, label: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidAngle(f"{label} is not a number: {value!r}") from exc
    if not math.isfinite(value) or abs(value) > MAX_SANE_DEGREES:
        raise InvalidAngle(f"{label} is not a sane finite angle: {value!r}")
    return value


def normalize_longitude(lon: float) -> float:
    lon = _check_angle(lon, "longitude") % 360.0
    # -1e-17 % 360 rounds to 360.0 in floating point
    return 0.0 if lon >= 360.0 else lon


def zodiac_sign(lon: float) -> Tuple[int, str]:
    index = min(int(normalize_longitude(lon) / SIGN_SPAN), 11)
    return index, ZODIAC_SIGNS[index]


def degrees_in_sign(lon: float) -> float:
    return normalize_longitude(lon) % SIGN_SPAN


def nakshatra_index(lon: float) -> int:
    index = int(math.floor(normalize_longitude(lon) * 27 / 360.0))
    return max(0, min(index, 26))


def get_pada(lon: float) -> int:
    remainder = normalize_longitude(lon) % NAKSHATRA_SPAN
    return max(1, min(int(remainder / PADA_SPAN) + 1, 4))


# -----------------------
# PANCHANG ELEMENTS
# -----------------------
def tithi(sun_lon: float, moon_lon: float) -> TithiInfo:
    sun_lon = _check_angle(sun_lon, "sun longitude")
    moon_lon = _check_angle(moon_lon, "moon longitude")

    angle = normalize_longitude(moon_lon - sun_lon)
    number = max(1, min(int(angle / TITHI_SPAN) + 1, 30))
    paksha = "Shukla" if number <= 15 else "Krishna"
    return TithiInfo(
        number=number,
        name=TITHI_LIST[number - 1],
        paksha=paksha,
        paksha_number=number if number <= 15 else number - 15,
    )


def yoga(sun_lon: float, moon_lon: float) -> YogaInfo:
    total = normalize_longitude(
        _check_angle(sun_lon, "sun longitude") + _check_angle(moon_lon, "moon longitude")
    )
    number = max(1, min(int(total / YOGA_SPAN) + 1, 27))
    return YogaInfo(number=number, name=YOGA_LIST[number - 1])


def nakshatra(moon_lon: float) -> NakshatraInfo:
    index = nakshatra_index(moon_lon)
    return NakshatraInfo(number=index + 1, name=NAKSHATRA_LIST[index], pada=get_pada(moon_lon))


def karana(sun_lon: float, moon_lon: float) -> KaranaInfo:
    angle = normalize_longitude(
        _check_angle(moon_lon, "moon longitude") - _check_angle(sun_lon, "sun longitude")
    )
    index = max(0, min(int(angle / KARANA_SPAN), 59))
    return KaranaInfo(number=index + 1, name=KARANA_LIST[index])


def is_rikta_tithi(tithi_number: int) -> bool:
    """Chaturthi, Navami and Chaturdashi of either paksha."""
    return ((tithi_number - 1) % 15) + 1 in (4, 9, 14)
