"""Swiss Ephemeris helpers used by the Panchang resolver and calculators."""

from __future__ import annotations

import os
import threading
from datetime import datetime, timezone
from typing import Dict

import swisseph as swe


# Engine version for API responses
try:
    ENGINE_VERSION = f"swisseph-{swe.version}"
except AttributeError:
    ENGINE_VERSION = "swisseph-2.10"  # Fallback if version not available

BODIES: Dict[str, int] = {
    "Sun": swe.SUN,
    "Moon": swe.MOON,
}

# ``None`` means tropical: no ayanamsha correction.
AYANAMSHA_MAP: Dict[str, int | None] = {
    "lahiri": swe.SIDM_LAHIRI,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
    "raman": swe.SIDM_RAMAN,
    "fagan_bradley": swe.SIDM_FAGAN_BRADLEY,
    "tropical": None,
}

# set_sid_mode is process-global inside the C library.
_SID_LOCK = threading.Lock()


class PanchangError(Exception):
    """Base class for Panchang computation failures."""


class EphemerisError(PanchangError):
    """Raised when the ephemeris cannot return a position."""


def _backend_flag() -> int:
    """Return the Swiss Ephemeris backend flag based on environment configuration."""

    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    backend = raw_backend.strip().lower() if raw_backend else "swieph"
    return swe.FLG_MOSEPH if backend == "moseph" else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


def normalize_ayanamsha(name: str | None) -> str:
    key = (name or "lahiri").strip().lower().replace("-", "_")
    if key not in AYANAMSHA_MAP:
        raise ValueError(
            f"Unsupported ayanamsha '{name}'; expected one of {', '.join(AYANAMSHA_MAP)}"
        )
    return key


def to_jd_utc(moment: datetime) -> float:
    """Convert an aware datetime to a Julian day in UT."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    dt_utc = moment.astimezone(timezone.utc)
    hour = (
        dt_utc.hour
        + dt_utc.minute / 60
        + dt_utc.second / 3600
        + dt_utc.microsecond / 3_600_000_000
    )
    return swe.julday(dt_utc.year, dt_utc.month, dt_utc.day, hour, swe.GREG_CAL)


def ayanamsha_value(jd_utc: float, ayanamsha: str = "lahiri") -> float:
    """Return the ayanamsha in degrees for ``jd_utc`` (0 for tropical)."""

    mode = AYANAMSHA_MAP[normalize_ayanamsha(ayanamsha)]
    if mode is None:
        return 0.0
    with _SID_LOCK:
        swe.set_sid_mode(mode)
        try:
            return float(swe.get_ayanamsa_ut(jd_utc))
        except swe.Error as exc:  # type: ignore[attr-defined]
            raise EphemerisError(f"ayanamsha lookup failed: {exc}") from exc


def positions_ecliptic(jd_utc: float) -> Dict[str, Dict[str, float]]:
    """Return tropical ecliptic longitude and daily speed for the Sun and Moon."""

    flag = _backend_flag() | swe.FLG_SPEED

    bodies: Dict[str, Dict[str, float]] = {}
    for name, code in BODIES.items():
        try:
            values, _ = swe.calc_ut(jd_utc, code, flag)
        except swe.Error as exc:  # type: ignore[attr-defined]
            raise EphemerisError(f"{name} position unavailable: {exc}") from exc
        lon, _lat, _dist, lon_speed, _lat_speed, _dist_speed = values
        bodies[name] = {
            "lon": lon % 360.0,
            "speed_lon": lon_speed,
        }

    return bodies
