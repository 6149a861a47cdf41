"""Public calculator endpoints - ROI for ad-hoc inputs, zone lookup, consumption presets."""

from fastapi import APIRouter, Request

from kalkyla.config import get_settings
from kalkyla.core.rate_limit import limiter
from kalkyla.schemas.calculator import (
    ApplyPresetRequest,
    ElomradeLookupResponse,
    PresetResponse,
    ProfileResponse,
    RoiRequest,
    RoiResponse,
    ScaleProfileRequest,
)
from kalkyla.services import calculator_service

router = APIRouter()
settings = get_settings()


@router.post("/roi", response_model=RoiResponse)
@limiter.limit(settings.public_rate_limit)
async def calculate_roi(request: Request, data: RoiRequest):
    return calculator_service.calculate_roi(data)


@router.get("/elomrade/{postal_code}", response_model=ElomradeLookupResponse)
async def lookup_elomrade(postal_code: str):
    """Swedish postal code to price zone; malformed codes give elomrade=null."""
    return calculator_service.lookup_elomrade(postal_code)


@router.get("/presets", response_model=list[PresetResponse])
async def list_presets():
    return calculator_service.list_presets()


@router.post("/presets/apply", response_model=ProfileResponse)
async def apply_preset(data: ApplyPresetRequest):
    return calculator_service.preset_profile(data)


@router.post("/profile/scale", response_model=ProfileResponse)
async def scale_profile(data: ScaleProfileRequest):
    return calculator_service.scale_profile(data)
