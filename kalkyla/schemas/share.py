"""Share link schemas. Public payloads deliberately omit margin, cost price and installer cut."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from kalkyla.db.models.enums import Elomrade
from kalkyla.schemas.calculation import ConsumptionProfile


class ShareLinkSettings(BaseModel):
    expires_at: datetime | None = None
    # None keeps the current password, "" removes it
    password: str | None = Field(None, max_length=72)
    custom_greeting: str | None = Field(None, max_length=2000)


class ShareLinkResponse(BaseModel):
    share_code: str
    share_url: str


class PublicAccessRequest(BaseModel):
    password: str | None = None


class PublicBattery(BaseModel):
    name: str
    brand_name: str
    brand_logo_url: str | None
    capacity_kwh: float
    max_discharge_kw: float
    max_charge_kw: float
    charge_efficiency: float
    discharge_efficiency: float
    warranty_years: int
    guaranteed_cycles: int
    degradation_per_year: float
    total_price_ex_vat: float
    total_price_inc_vat: float
    cost_after_gron_teknik: float


class PublicNatagare(BaseModel):
    name: str
    day_rate_sek_kw: float
    night_rate_sek_kw: float
    day_start_hour: int
    day_end_hour: int


class PublicOrganization(BaseModel):
    name: str
    slug: str
    logo_url: str | None
    primary_color: str
    secondary_color: str


class PublicCalculation(BaseModel):
    id: int
    customer_name: str
    elomrade: Elomrade
    annual_consumption_kwh: float
    consumption_profile: dict[str, Any]
    custom_greeting: str | None
    results: dict[str, Any] | None
    batteries: list[PublicBattery]
    natagare: PublicNatagare


class PublicCalculationResponse(BaseModel):
    calculation: PublicCalculation
    organization: PublicOrganization
    closer_name: str


class VariantCreate(BaseModel):
    name: str | None = Field(None, max_length=100)
    consumption_profile: ConsumptionProfile
    annual_consumption_kwh: float = Field(..., ge=1)
    results: dict[str, Any]


class VariantResponse(BaseModel):
    id: int
    calculation_id: int
    name: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ViewStats(BaseModel):
    total_views: int
    last_viewed_at: datetime | None
