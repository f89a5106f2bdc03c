"""
Static configuration for the Muhurat engine.

Everything here is read-only: tuples, frozensets and MappingProxyType, loaded
once at import and shared by all callers.
"""
import datetime
from types import MappingProxyType

from muhurat_finder.services.muhurat.schemas.muhurat_schemas import EventCategory

# -----------------------
# EVENT CATEGORIES
# -----------------------
EVENT_CATEGORIES = MappingProxyType({
    "wedding": EventCategory(key="wedding", name="Wedding", favorable_tithi=frozenset({1, 3, 5, 7, 10, 11, 13})),
    "travel": EventCategory(key="travel", name="Travel", favorable_tithi=frozenset({2, 4, 6, 8, 10, 12, 14})),
    "business": EventCategory(key="business", name="Business", favorable_tithi=frozenset({1, 2, 5, 9, 11, 13, 15})),
    "property": EventCategory(key="property", name="Property", favorable_tithi=frozenset({2, 5, 7, 10, 12, 14})),
    "education": EventCategory(key="education", name="Education", favorable_tithi=frozenset({1, 4, 5, 9, 10, 11})),
})

# -----------------------
# SCORING
# -----------------------
BASE_SCORE = 50
MIN_SCORE = 10
MAX_SCORE = 100

TITHI_BONUS = 25
NAKSHATRA_BONUS = 15
PHASE_ALIGNMENT_BONUS = 10
PHASE_ALIGNMENT_PERIOD_MONTHS = 6

# Python weekday() → bonus (Mon, Wed, Thu, Fri)
WEEKDAY_BONUS = MappingProxyType({
    0: 15,
    2: 20,
    3: 10,
    4: 15,
})

AUSPICIOUS_NAKSHATRAS = frozenset({
    "Rohini",
    "Pushya",
    "Hasta",
    "Swati",
    "Uttara Phalguni",
})

# (threshold, label), first match on score > threshold
DESCRIPTIONS = (
    (85, "Exceptionally auspicious"),
    (75, "Highly favorable"),
)
DEFAULT_DESCRIPTION = "Auspicious"

# -----------------------
# HORIZON RANKER
# -----------------------
HORIZON_DAYS = 90
RANK_MIN_SCORE = 60
TOP_N = 20

# Display slots evaluated per day (local time)
CANONICAL_SLOTS = (
    datetime.time(6, 0),
    datetime.time(7, 30),
    datetime.time(10, 15),
    datetime.time(11, 45),
)

# -----------------------
# DAYLIGHT MUHURTAS
# -----------------------
MUHURTA_COUNT = 15

MUHURTA_NAMES = (
    "Rudra", "Ahi", "Mitra", "Pitri", "Vasu",
    "Vara", "Vishvedeva", "Vidhi", "Satamukhi", "Puruhuta",
    "Vahini", "Naktanakara", "Varuna", "Aryaman", "Bhaga",
)

AUSPICIOUS = "Auspicious"
NEUTRAL = "Neutral"
INAUSPICIOUS = "Inauspicious"
QUALITY_LEVELS = (INAUSPICIOUS, NEUTRAL, AUSPICIOUS)

# Base nature of each daytime muhurta, keyed by ordinal (1-15)
MUHURTA_BASE_QUALITY = MappingProxyType({
    1: INAUSPICIOUS,   # Rudra
    2: INAUSPICIOUS,   # Ahi
    3: AUSPICIOUS,     # Mitra
    4: INAUSPICIOUS,   # Pitri
    5: AUSPICIOUS,     # Vasu
    6: AUSPICIOUS,     # Vara
    7: AUSPICIOUS,     # Vishvedeva
    8: AUSPICIOUS,     # Vidhi (Abhijit)
    9: AUSPICIOUS,     # Satamukhi
    10: INAUSPICIOUS,  # Puruhuta
    11: NEUTRAL,       # Vahini
    12: INAUSPICIOUS,  # Naktanakara
    13: AUSPICIOUS,    # Varuna
    14: AUSPICIOUS,    # Aryaman
    15: NEUTRAL,       # Bhaga
})

ABHIJIT_ORDINAL = 8
ABHIJIT_WEAK_WEEKDAYS = frozenset({2})  # Wednesday

# Rahu Kalam: 1-based eighth of daylight, keyed by Python weekday()
RAHU_KALAM_PART = MappingProxyType({
    0: 2,  # Monday
    1: 7,  # Tuesday
    2: 5,  # Wednesday
    3: 6,  # Thursday
    4: 4,  # Friday
    5: 3,  # Saturday
    6: 8,  # Sunday
})

# Used only when ALLOW_APPROXIMATE_DAYLIGHT is on
APPROXIMATE_SUNRISE = datetime.time(6, 0)
APPROXIMATE_SUNSET = datetime.time(18, 0)
