"""Calculation schemas - drafts, finalize parameters and list rows."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from kalkyla.db.models.enums import CalculationStatus, Elomrade


class ConsumptionProfile(BaseModel):
    """12 months x 24 hours of average hourly kWh."""

    data: list[list[float]]

    @field_validator("data")
    @classmethod
    def check_shape(cls, value: list[list[float]]) -> list[list[float]]:
        if len(value) != 12 or any(len(month) != 24 for month in value):
            raise ValueError("Profile must be 12 months x 24 hours")
        if any(hour < 0 for month in value for hour in month):
            raise ValueError("Consumption cannot be negative")
        return value


class CalculationBatteryInput(BaseModel):
    battery_config_id: int
    total_price_ex_vat: float = Field(..., ge=0)
    installation_cost: float = Field(0, ge=0)


class SaveDraftRequest(BaseModel):
    """Create when id is absent, otherwise update that draft."""

    id: int | None = None
    customer_name: str = Field(..., min_length=1, max_length=255)
    postal_code: str | None = Field(None, max_length=10)
    elomrade: Elomrade
    natagare_id: int
    annual_consumption_kwh: float = Field(..., ge=1)
    consumption_profile: ConsumptionProfile
    batteries: list[CalculationBatteryInput] = []
    # Super admins pick the tenant; everyone else is bound to their own org
    org_id: int | None = None


class FinalizeRequest(BaseModel):
    """Control parameters for the engine. Supplying `results` stores them verbatim."""

    results: dict[str, Any] | None = None
    cycles_per_day: float = Field(1, gt=0, le=5)
    avg_discharge_percent: float = Field(85, gt=0, le=100)
    peak_shaving_percent: float | None = Field(None, ge=0, le=100)
    current_peak_kw: float | None = Field(None, ge=0)
    post_campaign_rate_per_kw_year: float | None = Field(None, ge=0)
    grid_services_rate_per_kw_year: float | None = Field(None, ge=0)
    day_price_ore: float | None = None
    night_price_ore: float | None = None


class CalculationBatteryResponse(BaseModel):
    battery_config_id: int
    name: str
    brand_name: str
    total_price_ex_vat: float
    installation_cost: float
    sort_order: int


class CalculationResponse(BaseModel):
    id: int
    org_id: int
    created_by_id: int
    natagare_id: int
    customer_name: str
    postal_code: str | None
    elomrade: Elomrade
    annual_consumption_kwh: float
    consumption_profile: dict[str, Any]
    status: CalculationStatus
    results: dict[str, Any] | None
    parameters: dict[str, Any] | None
    finalized_at: datetime | None
    share_code: str | None
    share_is_active: bool
    share_expires_at: datetime | None
    custom_greeting: str | None
    batteries: list[CalculationBatteryResponse]
    created_at: datetime
    updated_at: datetime


class CalculationListItem(BaseModel):
    id: int
    customer_name: str
    elomrade: Elomrade
    status: CalculationStatus
    battery_name: str | None
    created_by_name: str | None
    org_name: str | None
    share_code: str | None
    share_is_active: bool
    view_count: int
    last_viewed_at: datetime | None
    created_at: datetime
    updated_at: datetime
