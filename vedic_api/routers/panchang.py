"""Panchang API endpoints."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from pydantic import ValidationError

from ..schemas.moment import BirthOrObservationMoment
from ..schemas.panchang import PanchangCalculations, PanchangRequest, PanchangResponse
from ..services.cache import ResponseCache
from ..services.ephem import PanchangError, normalize_ayanamsha
from ..services.orchestrators.panchang_full import lookup_or_compute


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/panchang", tags=["panchang"])


def _default_timezone() -> float:
    return float(os.getenv("DEFAULT_TIMEZONE_OFFSET", "5.5"))


def get_panchang_cache(request: Request) -> ResponseCache:
    return request.app.state.panchang_cache


def validation_detail(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def _run(
    request: Request, moment: BirthOrObservationMoment, ayanamsha: str, cache: ResponseCache
) -> PanchangResponse:
    request.state.ayanamsha = ayanamsha
    try:
        vm, cache_hit = lookup_or_compute(moment, ayanamsha=ayanamsha, cache=cache)
    except PanchangError as exc:
        logger.error(
            "panchang.compute.failed",
            extra={"error": str(exc), "moment": moment.model_dump()},
        )
        raise HTTPException(status_code=500, detail=f"Panchang computation failed: {exc}") from exc
    request.state.cache_hit = cache_hit
    return vm


def _moment_from_query(
    date: str,
    latitude: float,
    longitude: float,
    timezone: float | None,
    hours: int,
    minutes: int,
    seconds: int,
) -> BirthOrObservationMoment:
    try:
        day = datetime.strptime(date, "%Y-%m-%d").date()
    except ValueError as exc:
        raise HTTPException(
            status_code=422, detail=f"date must be YYYY-MM-DD, got '{date}'"
        ) from exc
    try:
        return BirthOrObservationMoment(
            year=day.year,
            month=day.month,
            day=day.day,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            latitude=latitude,
            longitude=longitude,
            timezone=_default_timezone() if timezone is None else timezone,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=validation_detail(exc)) from exc


def _checked_ayanamsha(ayanamsha: str) -> str:
    try:
        return normalize_ayanamsha(ayanamsha)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post(
    "/compute",
    response_model=PanchangResponse,
    summary="Compute Panchang for a local moment and location",
)
def panchang_compute(
    request: Request,
    req: PanchangRequest = Body(
        ...,
        examples=[
            {
                "year": 2024,
                "month": 4,
                "day": 14,
                "hours": 6,
                "minutes": 0,
                "seconds": 0,
                "latitude": 17.385,
                "longitude": 78.4867,
                "timezone": 5.5,
                "config": {"ayanamsha": "lahiri"},
            }
        ],
    ),
    cache: ResponseCache = Depends(get_panchang_cache),
):
    return _run(request, req, req.config.ayanamsha, cache)


@router.get(
    "",
    response_model=PanchangResponse,
    summary="Panchang for a calendar date (defaults to 06:00 local)",
)
def panchang_by_date(
    request: Request,
    date: str = Query(..., description="Date (YYYY-MM-DD)"),
    latitude: float = Query(..., description="Latitude"),
    longitude: float = Query(..., description="Longitude"),
    timezone: float | None = Query(None, description="UTC offset in hours"),
    hours: int = Query(6),
    minutes: int = Query(0),
    seconds: int = Query(0),
    ayanamsha: str = Query("lahiri"),
    cache: ResponseCache = Depends(get_panchang_cache),
):
    moment = _moment_from_query(date, latitude, longitude, timezone, hours, minutes, seconds)
    return _run(request, moment, _checked_ayanamsha(ayanamsha), cache)


@router.get(
    "/calculations",
    response_model=PanchangCalculations,
    summary="Muhurta and kaal windows for a calendar date",
)
def panchang_calculations(
    request: Request,
    date: str = Query(..., description="Date (YYYY-MM-DD)"),
    latitude: float = Query(..., description="Latitude"),
    longitude: float = Query(..., description="Longitude"),
    timezone: float | None = Query(None, description="UTC offset in hours"),
    hours: int = Query(6),
    minutes: int = Query(0),
    seconds: int = Query(0),
    ayanamsha: str = Query("lahiri"),
    cache: ResponseCache = Depends(get_panchang_cache),
):
    moment = _moment_from_query(date, latitude, longitude, timezone, hours, minutes, seconds)
    return _run(request, moment, _checked_ayanamsha(ayanamsha), cache).calculations
