"""Muhurta and kaal windows derived from sunrise and sunset.

Rahu Kaal, Yamaganda and Gulika Kaal each occupy one eighth of the daylight
span. The eighth they start in depends only on the weekday.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List

from .resolver import SolarLunarPosition

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

VEDIC_WEEKDAY_NAMES = [
    "Ravivara",
    "Somavara",
    "Mangalavara",
    "Budhavara",
    "Guruvara",
    "Shukravara",
    "Shanivara",
]

# Start offset, in eighths of the day after sunrise, indexed Sunday=0.
RAHU_SLOTS = [7, 6, 5, 4, 3, 2, 1]
YAMAGANDA_SLOTS = [6, 5, 4, 3, 2, 1, 7]
GULIKA_SLOTS = [5, 4, 3, 2, 1, 7, 6]

BRAHMA_MUHURTA_LEAD = timedelta(minutes=96)
ABHIJIT_HALF_WIDTH = timedelta(minutes=24)

DESCRIPTIONS = {
    "brahma_muhurta": "Most auspicious time for spiritual practices",
    "abhijit_muhurta": "Most favorable time for important activities",
    "rahu_kaal": "Inauspicious time, avoid starting new activities",
    "yamaganda": "Inauspicious time, avoid important decisions",
    "gulika_kaal": "Inauspicious time, avoid new ventures",
}


@dataclass(frozen=True)
class TimeWindow:
    key: str
    name: str
    start: datetime
    end: datetime
    category: str
    type: str
    description: str

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def weekday_index(moment: datetime) -> int:
    """Weekday with Sunday=0 (``datetime.weekday`` has Monday=0)."""

    return (moment.weekday() + 1) % 7


def _segment(start: datetime, duration: timedelta, slot: int) -> tuple[datetime, datetime]:
    """Return the eighth of ``duration`` that begins ``slot`` eighths after ``start``."""

    seg = duration / 8
    seg_start = start + slot * seg
    return seg_start, seg_start + seg


def _kaal(key: str, name: str, span: tuple[datetime, datetime]) -> TimeWindow:
    return TimeWindow(
        key=key,
        name=name,
        start=span[0],
        end=span[1],
        category="inauspicious",
        type="avoid",
        description=DESCRIPTIONS[key],
    )


def derive_windows(position: SolarLunarPosition, weekday: int) -> Dict[str, List[TimeWindow]]:
    if not 0 <= weekday <= 6:
        raise ValueError(f"weekday index must be in 0..6, got {weekday}")

    sunrise = position.sunrise
    day_length = position.day_duration
    solar_noon = position.solar_noon

    brahma = TimeWindow(
        key="brahma_muhurta",
        name="Brahma Muhurta",
        start=sunrise - BRAHMA_MUHURTA_LEAD,
        end=sunrise,
        category="auspicious",
        type="spiritual",
        description=DESCRIPTIONS["brahma_muhurta"],
    )
    abhijit = TimeWindow(
        key="abhijit_muhurta",
        name="Abhijit Muhurta",
        start=solar_noon - ABHIJIT_HALF_WIDTH,
        end=solar_noon + ABHIJIT_HALF_WIDTH,
        category="auspicious",
        type="general",
        description=DESCRIPTIONS["abhijit_muhurta"],
    )

    rahu = _kaal("rahu_kaal", "Rahu Kaal", _segment(sunrise, day_length, RAHU_SLOTS[weekday]))
    yamaganda = _kaal(
        "yamaganda", "Yamaganda", _segment(sunrise, day_length, YAMAGANDA_SLOTS[weekday])
    )
    gulika = _kaal(
        "gulika_kaal", "Gulika Kaal", _segment(sunrise, day_length, GULIKA_SLOTS[weekday])
    )

    return {
        "auspicious": [brahma, abhijit],
        "inauspicious": [rahu, yamaganda, gulika],
    }


def vedic_weekday_index(moment: datetime, sunrise: datetime) -> int:
    """The vara runs sunrise to sunrise, so pre-dawn moments keep the previous day."""

    index = weekday_index(moment)
    if moment < sunrise:
        index = (index - 1) % 7
    return index
