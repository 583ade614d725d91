"""Validated civil moment + location used as input to every calculator."""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..services.ephem import normalize_ayanamsha


class BirthOrObservationMoment(BaseModel):
    """Local date/time at a place, with the place's UTC offset in hours."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int = Field(..., ge=1000, le=3000)
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31, validation_alias=AliasChoices("day", "date"))
    hours: int = Field(..., ge=0, le=23)
    minutes: int = Field(..., ge=0, le=59)
    seconds: int = Field(..., ge=0, le=59)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    timezone: float = Field(..., ge=-12.0, le=14.0)

    @model_validator(mode="after")
    def _check_day_in_month(self) -> "BirthOrObservationMoment":
        last_day = calendar.monthrange(self.year, self.month)[1]
        if self.day > last_day:
            raise ValueError(
                f"day {self.day} is out of range for {self.year}-{self.month:02d} "
                f"(last day is {last_day})"
            )
        return self

    def tzinfo(self) -> timezone:
        return timezone(timedelta(hours=self.timezone))

    def local_datetime(self) -> datetime:
        return datetime(
            self.year,
            self.month,
            self.day,
            self.hours,
            self.minutes,
            self.seconds,
            tzinfo=self.tzinfo(),
        )

    def utc_datetime(self) -> datetime:
        return self.local_datetime().astimezone(timezone.utc)

    def day_of_year(self) -> int:
        return self.local_datetime().timetuple().tm_yday


class BirthInput(BaseModel):
    """Birth details as entered in the moon-sign and kundli calculators.

    ``hour`` is read on a 12-hour clock when ``ampm`` is given and on a
    24-hour clock otherwise. Coordinates are optional because neither
    calculator needs sunrise.
    """

    year: int = Field(..., ge=1000, le=3000)
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)
    ampm: Optional[Literal["AM", "PM"]] = None
    timezone: float = Field(..., ge=-12.0, le=14.0)
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    ayanamsha: str = Field(default="lahiri")

    @field_validator("ayanamsha")
    @classmethod
    def _check_ayanamsha(cls, value: str) -> str:
        return normalize_ayanamsha(value)

    @model_validator(mode="after")
    def _check_fields(self) -> "BirthInput":
        last_day = calendar.monthrange(self.year, self.month)[1]
        if self.day > last_day:
            raise ValueError(
                f"day {self.day} is out of range for {self.year}-{self.month:02d} "
                f"(last day is {last_day})"
            )
        if self.ampm is not None and not 1 <= self.hour <= 12:
            raise ValueError(f"hour {self.hour} is not valid on a 12-hour clock")
        return self

    def hour_24(self) -> int:
        if self.ampm == "PM" and self.hour < 12:
            return self.hour + 12
        if self.ampm == "AM" and self.hour == 12:
            return 0
        return self.hour

    def to_moment(self) -> BirthOrObservationMoment:
        return BirthOrObservationMoment(
            year=self.year,
            month=self.month,
            day=self.day,
            hours=self.hour_24(),
            minutes=self.minute,
            seconds=0,
            latitude=self.latitude if self.latitude is not None else 0.0,
            longitude=self.longitude if self.longitude is not None else 0.0,
            timezone=self.timezone,
        )
