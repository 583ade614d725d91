from pydantic import BaseModel


class MoonSignResponse(BaseModel):
    moon_sign: str
    ecliptic_longitude: float
    date_time_utc: str
    ayanamsha: str


class BodySign(BaseModel):
    longitude: float
    sign: str


class NakshatraSnapshot(BaseModel):
    name: str
    number: int
    pada: int


class TithiSnapshot(BaseModel):
    name: str
    number: int
    paksha: str


class KundliResponse(BaseModel):
    date_time_utc: str
    ayanamsha: str
    sun: BodySign
    moon: BodySign
    nakshatra: NakshatraSnapshot
    tithi: TithiSnapshot
