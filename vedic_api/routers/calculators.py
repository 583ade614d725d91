from fastapi import APIRouter, Body, HTTPException, Request
import logging

from ..schemas.calculators import KundliResponse, MoonSignResponse
from ..schemas.moment import BirthInput
from ..services.calculators import kundli_snapshot, moon_sign
from ..services.ephem import PanchangError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/calculators", tags=["calculators"])

_EXAMPLE = {
    "year": 1990,
    "month": 8,
    "day": 18,
    "hour": 2,
    "minute": 32,
    "ampm": "PM",
    "timezone": 5.5,
    "latitude": 17.385,
    "longitude": 78.4867,
}


@router.post("/moonsign", response_model=MoonSignResponse)
def compute_moon_sign(request: Request, req: BirthInput = Body(..., examples=[_EXAMPLE])):
    request.state.ayanamsha = req.ayanamsha
    try:
        return moon_sign(req.to_moment(), ayanamsha=req.ayanamsha)
    except PanchangError as exc:
        logger.error(f"MOONSIGN_ERROR: {exc}")
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/kundli", response_model=KundliResponse)
def compute_kundli(request: Request, req: BirthInput = Body(..., examples=[_EXAMPLE])):
    request.state.ayanamsha = req.ayanamsha
    try:
        return kundli_snapshot(req.to_moment(), ayanamsha=req.ayanamsha)
    except PanchangError as exc:
        logger.error(f"KUNDLI_ERROR: {exc}")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
