"""Build the Panchang response.

The pipeline is resolve -> derive elements -> derive windows -> format.
Each stage is pure, so a response depends only on the moment and the
ayanamsha; the optional cache is keyed on exactly those inputs.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from ...schemas.moment import BirthOrObservationMoment
from ...schemas.panchang import (
    DayDuration,
    KaranaEntry,
    LunarMonthInfo,
    NakshatraInfo,
    PanchangCalculations,
    PanchangResponse,
    RituInfo,
    TimeEntry,
    TithiInfo,
    WeekdayInfo,
    WindowSpan,
    YearInfo,
    YogaEntry,
)
from ..cache import ResponseCache
from ..ext_calendars import build_year_info
from ..muhurta import (
    VEDIC_WEEKDAY_NAMES,
    WEEKDAY_NAMES,
    TimeWindow,
    derive_windows,
    vedic_weekday_index,
    weekday_index,
)
from ..panchang_algos import PanchangElements, derive_elements
from ..resolver import SolarLunarPosition, resolve


logger = logging.getLogger(__name__)


def _format_clock(dt: datetime) -> str:
    return dt.strftime("%H:%M:%S")


def _format_ts(dt: Optional[datetime], tz) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S")


def _format_duration(delta: timedelta) -> DayDuration:
    seconds = int(delta.total_seconds())
    hours, rem = divmod(seconds, 3600)
    return DayDuration(hours=hours, minutes=rem // 60)


def _span(window: TimeWindow) -> WindowSpan:
    return WindowSpan(
        start=_format_clock(window.start),
        end=_format_clock(window.end),
        description=window.description,
    )


def _entry(window: TimeWindow) -> TimeEntry:
    return TimeEntry(
        name=window.name,
        start=_format_clock(window.start),
        end=_format_clock(window.end),
        type=window.type,
        description=window.description,
    )


def build_calculations(
    position: SolarLunarPosition, windows: Dict[str, List[TimeWindow]]
) -> PanchangCalculations:
    by_key = {w.key: w for group in windows.values() for w in group}
    return PanchangCalculations(
        brahma_muhurta=_span(by_key["brahma_muhurta"]),
        abhijit_muhurta=_span(by_key["abhijit_muhurta"]),
        rahu_kaal=_span(by_key["rahu_kaal"]),
        yamaganda=_span(by_key["yamaganda"]),
        gulika_kaal=_span(by_key["gulika_kaal"]),
        day_duration=_format_duration(position.day_duration),
        auspicious_times=[_entry(w) for w in windows["auspicious"]],
        inauspicious_times=[_entry(w) for w in windows["inauspicious"]],
    )


def format_panchang(
    moment: BirthOrObservationMoment,
    position: SolarLunarPosition,
    elements: PanchangElements,
    windows: Dict[str, List[TimeWindow]],
) -> PanchangResponse:
    tz = moment.tzinfo()
    local_dt = moment.local_datetime()
    civil_idx = weekday_index(local_dt)
    vedic_idx = vedic_weekday_index(local_dt, position.sunrise)
    lunar_month = elements.lunar_month
    tithi = elements.tithi
    nakshatra = elements.nakshatra

    year = build_year_info(local_dt, lunar_month.index)

    return PanchangResponse(
        sun_rise=_format_clock(position.sunrise),
        sun_set=_format_clock(position.sunset),
        weekday=WeekdayInfo(
            weekday_number=civil_idx + 1,
            weekday_name=WEEKDAY_NAMES[civil_idx],
            vedic_weekday_number=vedic_idx + 1,
            vedic_weekday_name=VEDIC_WEEKDAY_NAMES[vedic_idx],
        ),
        lunar_month=LunarMonthInfo(
            lunar_month_number=lunar_month.number,
            lunar_month_name=lunar_month.name,
            lunar_month_full_name=lunar_month.full_name,
            adhika=lunar_month.adhika,
            nija=lunar_month.nija,
            kshaya=lunar_month.kshaya,
        ),
        ritu=RituInfo(number=elements.ritu_number, name=elements.ritu_name),
        aayanam=elements.aayanam,
        tithi=TithiInfo(
            number=tithi.number,
            name=tithi.name,
            paksha=tithi.paksha,
            completes_at=_format_ts(tithi.end, tz),
            left_precentage=tithi.percentage_left,
        ),
        nakshatra=NakshatraInfo(
            number=nakshatra.number,
            name=nakshatra.name,
            pada=nakshatra.pada,
            starts_at=_format_ts(nakshatra.start, tz),
            ends_at=_format_ts(nakshatra.end, tz),
            left_percentage=nakshatra.percentage_left,
        ),
        yoga={
            str(i): YogaEntry(
                number=yoga.number,
                name=yoga.name,
                completion=_format_ts(yoga.end, tz),
                yoga_left_percentage=yoga.percentage_left,
            )
            for i, yoga in enumerate(elements.yoga, start=1)
        },
        karana={
            str(i): KaranaEntry(
                number=karana.number,
                name=karana.name,
                completion=_format_ts(karana.end, tz),
                karana_left_percentage=karana.percentage_left,
            )
            for i, karana in enumerate(elements.karana, start=1)
        },
        year=YearInfo(
            status="success",
            timestamp=position.instant.astimezone(timezone.utc).isoformat(),
            **year,
        ),
        calculations=build_calculations(position, windows),
    )


def compute_panchang(moment: BirthOrObservationMoment, ayanamsha: str = "lahiri") -> PanchangResponse:
    position = resolve(moment, ayanamsha=ayanamsha)
    elements = derive_elements(position)
    windows = derive_windows(position, weekday_index(moment.local_datetime()))
    return format_panchang(moment, position, elements, windows)


def lookup_or_compute(
    moment: BirthOrObservationMoment,
    ayanamsha: str = "lahiri",
    cache: Optional[ResponseCache] = None,
) -> Tuple[PanchangResponse, bool]:
    """Return the response and whether it came from the cache."""

    if cache is None or not cache.enabled:
        return compute_panchang(moment, ayanamsha), False

    fields = set(BirthOrObservationMoment.model_fields)
    key = cache.key_for({"moment": moment.model_dump(include=fields), "ayanamsha": ayanamsha})
    cached_raw = cache.get(key)
    if cached_raw:
        try:
            vm = PanchangResponse.model_validate_json(cached_raw)
        except ValidationError:
            logger.exception("panchang.cache.invalid", extra={"cache_key": key})
            cache.delete(key)
        else:
            logger.debug("panchang.cache.hit", extra={"cache_key": key})
            return vm, True

    vm = compute_panchang(moment, ayanamsha)
    cache.set(key, vm.model_dump_json())
    return vm, False


def build_panchang(
    moment: BirthOrObservationMoment,
    ayanamsha: str = "lahiri",
    cache: Optional[ResponseCache] = None,
) -> PanchangResponse:
    return lookup_or_compute(moment, ayanamsha, cache)[0]
