"""Resolve a civil moment into the solar/lunar quantities the Panchang needs.

Sunrise and sunset use the classic declination/hour-angle approximation
rather than a topocentric rise search, so the result is a closed-form
function of the date, the coordinates and the UTC offset. Longitudes come
from the Swiss Ephemeris.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time as time_cls, timedelta, timezone, tzinfo
from typing import Tuple

from ..schemas.moment import BirthOrObservationMoment
from . import ephem


logger = logging.getLogger(__name__)

OBLIQUITY_DEG = 23.45


@dataclass(frozen=True)
class SolarLunarPosition:
    instant: datetime
    sunrise: datetime
    sunset: datetime
    sun_longitude: float
    moon_longitude: float
    sun_longitude_tropical: float
    moon_longitude_tropical: float
    sun_speed: float
    moon_speed: float
    ayanamsha: str
    ayanamsha_value: float
    polar: bool = False

    @property
    def day_duration(self) -> timedelta:
        return self.sunset - self.sunrise

    @property
    def solar_noon(self) -> datetime:
        return self.sunrise + self.day_duration / 2

    @property
    def elongation(self) -> float:
        return (self.moon_longitude - self.sun_longitude) % 360.0

    def local(self, moment: datetime) -> datetime:
        return moment.astimezone(self.sunrise.tzinfo)


def solar_declination(day_of_year: int) -> float:
    return OBLIQUITY_DEG * math.sin((284 + day_of_year) * math.pi / 180.0)


def sun_times(
    day: date, latitude: float, longitude: float, tz_offset_hours: float
) -> Tuple[datetime, datetime, bool]:
    """Return (sunrise, sunset, polar) as local aware datetimes.

    ``polar`` is True when the hour-angle cosine fell outside [-1, 1] and
    had to be clamped: a zero-length day for polar night, a 24 hour day
    for polar day.
    """

    tz: tzinfo = timezone(timedelta(hours=tz_offset_hours))
    declination = solar_declination(day.timetuple().tm_yday)
    cos_h = -math.tan(math.radians(latitude)) * math.tan(math.radians(declination))
    polar = not -1.0 <= cos_h <= 1.0
    if polar:
        logger.warning(
            "panchang.sun_times.polar_clamp",
            extra={"date": day.isoformat(), "lat": latitude, "cos_h": cos_h},
        )
        cos_h = max(-1.0, min(1.0, cos_h))

    half_day_hours = math.acos(cos_h) * 12.0 / math.pi
    reference_meridian = tz_offset_hours * 15.0
    correction = (longitude - reference_meridian) / 15.0

    midnight = datetime.combine(day, time_cls(0, 0), tzinfo=tz)
    sunrise = midnight + timedelta(hours=12.0 - half_day_hours - correction)
    sunset = midnight + timedelta(hours=12.0 + half_day_hours - correction)
    return sunrise, sunset, polar


def resolve(moment: BirthOrObservationMoment, ayanamsha: str = "lahiri") -> SolarLunarPosition:
    ayanamsha = ephem.normalize_ayanamsha(ayanamsha)
    local_dt = moment.local_datetime()
    instant = local_dt.astimezone(timezone.utc)

    sunrise, sunset, polar = sun_times(
        local_dt.date(), moment.latitude, moment.longitude, moment.timezone
    )

    jd = ephem.to_jd_utc(instant)
    bodies = ephem.positions_ecliptic(jd)
    ayan = ephem.ayanamsha_value(jd, ayanamsha)
    sun = bodies["Sun"]
    moon = bodies["Moon"]

    return SolarLunarPosition(
        instant=instant,
        sunrise=sunrise,
        sunset=sunset,
        sun_longitude=(sun["lon"] - ayan) % 360.0,
        moon_longitude=(moon["lon"] - ayan) % 360.0,
        sun_longitude_tropical=sun["lon"],
        moon_longitude_tropical=moon["lon"],
        sun_speed=sun["speed_lon"],
        moon_speed=moon["speed_lon"],
        ayanamsha=ayanamsha,
        ayanamsha_value=ayan,
        polar=polar,
    )
