import datetime
from typing import FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from muhurat_finder.services.astrology.schemas import (
    GeoPosition,
    LocationInput,
    NakshatraInfo,
    TithiInfo,
    YogaInfo,
)

Quality = Literal["Auspicious", "Neutral", "Inauspicious"]
DaylightSource = Literal["ephemeris", "approximate"]


class EventCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    favorable_tithi: FrozenSet[int]

    @field_validator("favorable_tithi")
    @classmethod
    def tithi_in_range(cls, v: FrozenSet[int]) -> FrozenSet[int]:
        bad = sorted(t for t in v if not 1 <= t <= 30)
        if bad:
            raise ValueError(f"favorable_tithi must be within 1-30, got {bad}")
        return v


class BirthProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    time: Optional[datetime.time] = None
    location: str = Field(default="", max_length=200)


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: int
    score: int = Field(..., ge=10, le=100)
    reasons: List[str]


class ScoredCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    time: datetime.time
    datetime_local: datetime.datetime
    event_category: str
    score: int = Field(..., ge=10, le=100)
    description: str
    weekday: str
    tithi: TithiInfo
    nakshatra: NakshatraInfo
    yoga: YogaInfo
    reasons: List[str]
    details: str


class RankingMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    today: datetime.date
    horizon_days: int
    min_score: int
    top_n: int
    timezone: str
    ephemeris: str
    days_scanned: int
    candidates_found: int
    approximate: bool = False


class RankingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "success"
    event_category: str
    candidates: List[ScoredCandidate]
    meta: RankingMeta


class MuhurtaInterval(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, le=15)
    name: str
    start: datetime.datetime
    end: datetime.datetime
    quality: Quality
    quality_rule: str
    in_rahu_kalam: bool
    tithi: TithiInfo
    yoga: YogaInfo
    nakshatra: NakshatraInfo


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime.datetime
    end: datetime.datetime


class DayMuhurtas(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    timezone: str
    geo: GeoPosition
    sunrise: datetime.datetime
    sunset: datetime.datetime
    day_length_hours: float
    daylight_source: DaylightSource
    rahu_kalam: TimeWindow
    muhurtas: List[MuhurtaInterval]


# -----------------------
# API PAYLOADS
# -----------------------
class MuhuratRankRequest(BaseModel):
    birth_profile: BirthProfile
    event_category: str = Field(..., min_length=1, max_length=40)
    horizon_days: int = Field(default=90, ge=1, le=366)
    min_score: int = Field(default=60, ge=0, le=100)
    top_n: int = Field(default=20, ge=1, le=100)
    timezone: Optional[str] = None
    today: Optional[datetime.date] = None


class DayMuhurtasRequest(BaseModel):
    date: datetime.date
    location: LocationInput


class PositionsRequest(BaseModel):
    date: datetime.date
    time: datetime.time = datetime.time(12, 0)
    timezone: Optional[str] = None
    location: Optional[LocationInput] = None


class EventCategoryItem(BaseModel):
    key: str
    name: str
    favorable_tithi: List[int]
