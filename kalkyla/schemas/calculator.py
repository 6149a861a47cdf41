"""Public calculator schemas - ad-hoc ROI, zone lookup and consumption presets."""

from typing import Any

from pydantic import BaseModel, Field

from kalkyla.calculations.constants import DEFAULT_ANNUAL_CONSUMPTION_KWH
from kalkyla.db.models.enums import Elomrade


class RoiRequest(BaseModel):
    capacity_kwh: float = Field(..., gt=0)
    max_discharge_kw: float = Field(..., gt=0)
    charge_efficiency: float = Field(95, gt=0, le=100)
    discharge_efficiency: float = Field(95, gt=0, le=100)
    warranty_years: int | None = Field(None, gt=0)
    guaranteed_cycles: int | None = Field(None, gt=0)
    total_price_ex_vat: float = Field(..., ge=0)
    installation_cost: float = Field(0, ge=0)
    day_price_ore: float
    night_price_ore: float
    effect_tariff_day_rate: float = Field(..., ge=0)
    cycles_per_day: float = Field(1, gt=0, le=5)
    avg_discharge_percent: float = Field(85, gt=0, le=100)
    grid_services_rate_per_kw_year: float = Field(500, ge=0)
    peak_shaving_percent: float | None = Field(None, ge=0, le=100)
    current_peak_kw: float | None = Field(None, ge=0)
    elomrade: Elomrade | None = None
    is_emaldo_battery: bool = False
    post_campaign_rate_per_kw_year: float | None = Field(None, ge=0)
    total_projection_years: int = Field(10, ge=1, le=30)


class RoiResponse(BaseModel):
    results: dict[str, Any]


class ElomradeLookupResponse(BaseModel):
    postal_code: str
    formatted: str
    valid: bool
    elomrade: Elomrade | None


class PresetResponse(BaseModel):
    id: str
    name: str
    description: str
    hourly_pattern: list[float]
    monthly_factors: list[float]


class ApplyPresetRequest(BaseModel):
    preset_id: str
    annual_kwh: float = Field(float(DEFAULT_ANNUAL_CONSUMPTION_KWH), gt=0)


class ProfileResponse(BaseModel):
    data: list[list[float]]
    total_kwh: float


class ScaleProfileRequest(BaseModel):
    data: list[list[float]]
    target_annual_kwh: float = Field(..., ge=0)
