"""Panchang request and response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from .moment import BirthOrObservationMoment
from ..services.ephem import normalize_ayanamsha


class PanchangConfig(BaseModel):
    ayanamsha: str = Field(default="lahiri")

    @field_validator("ayanamsha")
    @classmethod
    def _check_ayanamsha(cls, value: str) -> str:
        return normalize_ayanamsha(value)


class PanchangRequest(BirthOrObservationMoment):
    config: PanchangConfig = Field(default_factory=PanchangConfig)


class WeekdayInfo(BaseModel):
    weekday_number: int
    weekday_name: str
    vedic_weekday_number: int
    vedic_weekday_name: str


class LunarMonthInfo(BaseModel):
    lunar_month_number: int
    lunar_month_name: str
    lunar_month_full_name: str
    adhika: int
    nija: int
    kshaya: int


class RituInfo(BaseModel):
    number: int
    name: str


class TithiInfo(BaseModel):
    number: int
    name: str
    paksha: str
    completes_at: Optional[str] = None
    left_precentage: Optional[float] = None


class NakshatraInfo(BaseModel):
    number: int
    name: str
    pada: Optional[int] = None
    starts_at: Optional[str] = None
    ends_at: Optional[str] = None
    left_percentage: Optional[float] = None


class YogaEntry(BaseModel):
    number: int
    name: str
    completion: Optional[str] = None
    yoga_left_percentage: Optional[float] = None


class KaranaEntry(BaseModel):
    number: int
    name: str
    completion: Optional[str] = None
    karana_left_percentage: Optional[float] = None


class YearInfo(BaseModel):
    status: str = "success"
    timestamp: str
    saka_salivahana_number: int
    saka_salivahana_name_number: int
    saka_salivahana_year_name: str
    vikram_chaitradi_number: int
    vikram_chaitradi_name_number: int
    vikram_chaitradi_year_name: str


class WindowSpan(BaseModel):
    start: str
    end: str
    description: str


class DayDuration(BaseModel):
    hours: int
    minutes: int


class TimeEntry(BaseModel):
    name: str
    start: str
    end: str
    type: str
    description: str


class PanchangCalculations(BaseModel):
    brahma_muhurta: WindowSpan
    abhijit_muhurta: WindowSpan
    rahu_kaal: WindowSpan
    yamaganda: WindowSpan
    gulika_kaal: WindowSpan
    day_duration: DayDuration
    auspicious_times: List[TimeEntry] = Field(default_factory=list)
    inauspicious_times: List[TimeEntry] = Field(default_factory=list)


class PanchangResponse(BaseModel):
    sun_rise: str
    sun_set: str
    weekday: WeekdayInfo
    lunar_month: LunarMonthInfo
    ritu: RituInfo
    aayanam: str
    tithi: TithiInfo
    nakshatra: NakshatraInfo
    yoga: Dict[str, YogaEntry]
    karana: Dict[str, KaranaEntry]
    year: YearInfo
    calculations: PanchangCalculations
