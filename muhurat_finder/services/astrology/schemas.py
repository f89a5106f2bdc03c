from __future__ import annotations

import datetime as _dt
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GeoPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude: float = 0.0


class LocationInput(BaseModel):
    # Lat/Lon mode
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    altitude: float = 0.0
    timezone: Optional[str] = None  # e.g. "Asia/Kolkata"

    # Place mode
    place: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    label: Optional[str] = None

    @model_validator(mode="after")
    def validate_location(self):
        has_latlon = self.latitude is not None and self.longitude is not None
        has_place = bool(self.place or self.city or self.state or self.country)
        if not has_latlon and not has_place:
            raise ValueError("location must include lat/lon or a place/city/state/country")
        return self


class ResolvedLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    geo: GeoPosition
    timezone: str
    label: Optional[str] = None


class TithiInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, le=30)
    name: str
    paksha: Literal["Shukla", "Krishna"]
    paksha_number: int = Field(..., ge=1, le=15)

    @property
    def waxing(self) -> bool:
        return self.paksha == "Shukla"


class YogaInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, le=27)
    name: str


class NakshatraInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, le=27)
    name: str
    pada: int = Field(..., ge=1, le=4)


class KaranaInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, le=60)
    name: str


class BodyPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    body: str
    longitude: float = Field(..., ge=0, lt=360)
    sign_index: int = Field(..., ge=0, le=11)
    sign: str
    degrees_in_sign: float = Field(..., ge=0, lt=30)
    nakshatra_index: int = Field(..., ge=0, le=26)
    nakshatra: str
    pada: int = Field(..., ge=1, le=4)
    derived: bool = False


class PositionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    instant: _dt.datetime
    julian_day: float
    geo: Optional[GeoPosition] = None
    provider: str
    positions: Dict[str, BodyPosition]
    tithi: TithiInfo
    yoga: YogaInfo
    nakshatra: NakshatraInfo
    karana: KaranaInfo

    @property
    def sun(self) -> BodyPosition:
        return self.positions["Sun"]

    @property
    def moon(self) -> BodyPosition:
        return self.positions["Moon"]
