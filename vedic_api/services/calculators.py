"""Moon-sign and kundli snapshot calculators built on the Panchang resolver."""

from __future__ import annotations

from ..schemas.calculators import (
    BodySign,
    KundliResponse,
    MoonSignResponse,
    NakshatraSnapshot,
    TithiSnapshot,
)
from ..schemas.moment import BirthOrObservationMoment
from .panchang_algos import compute_nakshatra, compute_tithi, sign_name
from .resolver import resolve


def moon_sign(moment: BirthOrObservationMoment, ayanamsha: str = "lahiri") -> MoonSignResponse:
    position = resolve(moment, ayanamsha=ayanamsha)
    return MoonSignResponse(
        moon_sign=sign_name(position.moon_longitude),
        ecliptic_longitude=round(position.moon_longitude, 6),
        date_time_utc=position.instant.isoformat(),
        ayanamsha=position.ayanamsha,
    )


def kundli_snapshot(moment: BirthOrObservationMoment, ayanamsha: str = "lahiri") -> KundliResponse:
    position = resolve(moment, ayanamsha=ayanamsha)
    nakshatra = compute_nakshatra(position)
    tithi = compute_tithi(position)
    return KundliResponse(
        date_time_utc=position.instant.isoformat(),
        ayanamsha=position.ayanamsha,
        sun=BodySign(
            longitude=round(position.sun_longitude, 6),
            sign=sign_name(position.sun_longitude),
        ),
        moon=BodySign(
            longitude=round(position.moon_longitude, 6),
            sign=sign_name(position.moon_longitude),
        ),
        nakshatra=NakshatraSnapshot(
            name=nakshatra.name, number=nakshatra.number, pada=nakshatra.pada
        ),
        tithi=TithiSnapshot(name=tithi.name, number=tithi.number, paksha=tithi.paksha),
    )
