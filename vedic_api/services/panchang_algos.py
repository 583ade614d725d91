"""Panchang element algorithms.

Every element is a fixed modular division of a longitude (or of the
Moon-Sun elongation) taken from a :class:`SolarLunarPosition`. Start and
end times are linear estimates from the instantaneous daily motion, which
keeps the whole derivation a pure function of the resolved position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from .resolver import SolarLunarPosition

# Shared by both pakshas; slot 15 is Purnima in Shukla and Amavasya in Krishna.
TITHI_NAMES = [
    "Pratipada",
    "Dwitiya",
    "Tritiya",
    "Chaturthi",
    "Panchami",
    "Shashthi",
    "Saptami",
    "Ashtami",
    "Navami",
    "Dashami",
    "Ekadashi",
    "Dwadashi",
    "Trayodashi",
    "Chaturdashi",
    "Purnima",
]

NAKSHATRA_NAMES = [
    "Ashwini",
    "Bharani",
    "Krittika",
    "Rohini",
    "Mrigashira",
    "Ardra",
    "Punarvasu",
    "Pushya",
    "Ashlesha",
    "Magha",
    "Purva Phalguni",
    "Uttara Phalguni",
    "Hasta",
    "Chitra",
    "Swati",
    "Vishakha",
    "Anuradha",
    "Jyeshtha",
    "Mula",
    "Purva Ashadha",
    "Uttara Ashadha",
    "Shravana",
    "Dhanishta",
    "Shatabhisha",
    "Purva Bhadrapada",
    "Uttara Bhadrapada",
    "Revati",
]

YOGA_NAMES = [
    "Vishkambha",
    "Priti",
    "Ayushman",
    "Saubhagya",
    "Shobhana",
    "Atiganda",
    "Sukarma",
    "Dhriti",
    "Shoola",
    "Ganda",
    "Vriddhi",
    "Dhruva",
    "Vyaghata",
    "Harshana",
    "Vajra",
    "Siddhi",
    "Vyatipata",
    "Variyan",
    "Parigha",
    "Shiva",
    "Siddha",
    "Sadhya",
    "Shubha",
    "Shukla",
    "Brahma",
    "Indra",
    "Vaidhriti",
]

MOBILE_KARANAS = [
    "Bava",
    "Balava",
    "Kaulava",
    "Taitila",
    "Garaja",
    "Vanija",
    "Vishti",
]

FIXED_KARANAS = [
    "Shakuni",
    "Chatushpada",
    "Naga",
    "Kimstughna",
]

MASA_AMANTA = [
    "Chaitra",
    "Vaishakha",
    "Jyeshtha",
    "Ashadha",
    "Shravana",
    "Bhadrapada",
    "Ashwin",
    "Kartika",
    "Margashirsha",
    "Pausha",
    "Magha",
    "Phalguna",
]

RITU_NAMES = [
    "Vasanta",
    "Grishma",
    "Varsha",
    "Sharad",
    "Hemanta",
    "Shishira",
]

ZODIAC_EN = [
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
]

TITHI_SPAN = 12.0
NAKSHATRA_SPAN = 360.0 / 27.0
PADA_SPAN = NAKSHATRA_SPAN / 4.0
YOGA_SPAN = 360.0 / 27.0
KARANA_SPAN = 6.0
SIGN_SPAN = 30.0


@dataclass(frozen=True)
class PanchangElement:
    number: int
    name: str
    percentage_left: float
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class TithiElement(PanchangElement):
    paksha: str = "Shukla"


@dataclass(frozen=True)
class NakshatraElement(PanchangElement):
    pada: int = 1


@dataclass(frozen=True)
class LunarMonth:
    index: int
    name: str
    adhika: int
    kshaya: int

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def nija(self) -> int:
        return 1 - self.adhika

    @property
    def full_name(self) -> str:
        return f"Adhika {self.name}" if self.adhika else self.name


@dataclass(frozen=True)
class PanchangElements:
    tithi: TithiElement
    nakshatra: NakshatraElement
    yoga: List[PanchangElement] = field(default_factory=list)
    karana: List[PanchangElement] = field(default_factory=list)
    lunar_month: Optional[LunarMonth] = None
    ritu_number: int = 1
    ritu_name: str = RITU_NAMES[0]
    aayanam: str = "Uttarayanam"


# --- N A M E S ---


def tithi_name(number: int) -> str:
    if number == 30:
        return "Amavasya"
    return TITHI_NAMES[(number - 1) % 15]


def paksha_for(number: int) -> str:
    return "Shukla" if number <= 15 else "Krishna"


def karana_at_delta_deg(delta_deg: float) -> Tuple[int, str]:
    """Resolve the karana number (1-based) and display name for an elongation."""

    d = delta_deg % 360.0
    half_tithi_index = min(int(d // KARANA_SPAN), 59)

    if half_tithi_index == 0:
        return 11, "Kimstughna"
    if half_tithi_index == 57:
        return 8, "Shakuni"
    if half_tithi_index == 58:
        return 9, "Chatushpada"
    if half_tithi_index == 59:
        return 10, "Naga"

    slot = (half_tithi_index - 1) % len(MOBILE_KARANAS)
    return 1 + slot, MOBILE_KARANAS[slot]


def sign_index(longitude: float) -> int:
    # A tiny negative longitude wraps to exactly 360.0.
    return min(int((longitude % 360.0) // SIGN_SPAN), 11)


def sign_name(longitude: float) -> str:
    return ZODIAC_EN[sign_index(longitude)]


# --- T I M I N G ---


def _span_state(value: float, span: float) -> Tuple[int, float, float]:
    """Return (0-based index, degrees elapsed, degrees remaining) within a span."""

    index = min(int(value // span), round(360.0 / span) - 1)
    elapsed = value - index * span
    return index, elapsed, span - elapsed


def _percentage_left(remaining: float, span: float) -> float:
    return round(remaining / span * 100.0, 4)


def _boundaries(
    instant: datetime, elapsed: float, remaining: float, speed: float
) -> Tuple[Optional[datetime], Optional[datetime]]:
    if speed <= 0:
        return None, None
    start = instant - timedelta(days=elapsed / speed)
    end = instant + timedelta(days=remaining / speed)
    return start, end


# --- E L E M E N T S ---


def compute_tithi(position: SolarLunarPosition) -> TithiElement:
    speed = position.moon_speed - position.sun_speed
    index, elapsed, remaining = _span_state(position.elongation, TITHI_SPAN)
    number = index + 1
    start, end = _boundaries(position.instant, elapsed, remaining, speed)
    return TithiElement(
        number=number,
        name=tithi_name(number),
        percentage_left=_percentage_left(remaining, TITHI_SPAN),
        start=start,
        end=end,
        paksha=paksha_for(number),
    )


def compute_nakshatra(position: SolarLunarPosition) -> NakshatraElement:
    moon = position.moon_longitude
    index, elapsed, remaining = _span_state(moon, NAKSHATRA_SPAN)
    start, end = _boundaries(position.instant, elapsed, remaining, position.moon_speed)
    return NakshatraElement(
        number=index + 1,
        name=NAKSHATRA_NAMES[index % 27],
        percentage_left=_percentage_left(remaining, NAKSHATRA_SPAN),
        start=start,
        end=end,
        pada=min(int(elapsed // PADA_SPAN), 3) + 1,
    )


def compute_yoga(position: SolarLunarPosition) -> List[PanchangElement]:
    """Return the current yoga followed by the next one."""

    value = (position.sun_longitude + position.moon_longitude) % 360.0
    speed = position.sun_speed + position.moon_speed
    index, elapsed, remaining = _span_state(value, YOGA_SPAN)
    start, end = _boundaries(position.instant, elapsed, remaining, speed)
    current = PanchangElement(
        number=index + 1,
        name=YOGA_NAMES[index % 27],
        percentage_left=_percentage_left(remaining, YOGA_SPAN),
        start=start,
        end=end,
    )
    next_index = (index + 1) % 27
    next_end = end + timedelta(days=YOGA_SPAN / speed) if end is not None else None
    upcoming = PanchangElement(
        number=next_index + 1,
        name=YOGA_NAMES[next_index],
        percentage_left=100.0,
        start=end,
        end=next_end,
    )
    return [current, upcoming]


def compute_karana(position: SolarLunarPosition) -> List[PanchangElement]:
    """Return the current karana followed by the next one."""

    delta = position.elongation
    speed = position.moon_speed - position.sun_speed
    index, elapsed, remaining = _span_state(delta, KARANA_SPAN)
    start, end = _boundaries(position.instant, elapsed, remaining, speed)
    number, name = karana_at_delta_deg(delta)
    current = PanchangElement(
        number=number,
        name=name,
        percentage_left=_percentage_left(remaining, KARANA_SPAN),
        start=start,
        end=end,
    )
    next_mid = ((index + 1.5) * KARANA_SPAN) % 360.0
    next_number, next_name = karana_at_delta_deg(next_mid)
    next_end = end + timedelta(days=KARANA_SPAN / speed) if end is not None else None
    upcoming = PanchangElement(
        number=next_number,
        name=next_name,
        percentage_left=100.0,
        start=end,
        end=next_end,
    )
    return [current, upcoming]


def compute_lunar_month(position: SolarLunarPosition) -> LunarMonth:
    """Amanta month named after the solar sign at the preceding new moon.

    New moons are extrapolated linearly from the current elongation; when
    the Sun stays in one sign across both new moons the month is adhika,
    and when it skips a sign the month is kshaya.
    """

    speed = position.moon_speed - position.sun_speed
    elongation = position.elongation
    days_since_new = elongation / speed
    days_to_next = (360.0 - elongation) / speed

    sun_at_prev = (position.sun_longitude - position.sun_speed * days_since_new) % 360.0
    sun_at_next = (position.sun_longitude + position.sun_speed * days_to_next) % 360.0
    sign_prev = sign_index(sun_at_prev)
    sign_next = sign_index(sun_at_next)

    index = (sign_prev + 1) % 12
    gap = (sign_next - sign_prev) % 12
    return LunarMonth(
        index=index,
        name=MASA_AMANTA[index],
        adhika=1 if gap == 0 else 0,
        kshaya=1 if gap >= 2 else 0,
    )


def compute_ritu(lunar_month: LunarMonth) -> Tuple[int, str]:
    index = lunar_month.index // 2
    return index + 1, RITU_NAMES[index]


def compute_aayanam(sun_longitude_tropical: float) -> str:
    lon = sun_longitude_tropical % 360.0
    if lon >= 270.0 or lon < 90.0:
        return "Uttarayanam"
    return "Dakshinayanam"


def derive_elements(position: SolarLunarPosition) -> PanchangElements:
    lunar_month = compute_lunar_month(position)
    ritu_number, ritu_name = compute_ritu(lunar_month)
    return PanchangElements(
        tithi=compute_tithi(position),
        nakshatra=compute_nakshatra(position),
        yoga=compute_yoga(position),
        karana=compute_karana(position),
        lunar_month=lunar_month,
        ritu_number=ritu_number,
        ritu_name=ritu_name,
        aayanam=compute_aayanam(position.sun_longitude_tropical),
    )
