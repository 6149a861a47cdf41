"""Lead and company schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from kalkyla.db.models.enums import Budget, Elomrade, InterestType, LeadStatus, PropertyType, Timeline


class LeadCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=50)
    property_type: PropertyType
    postal_code: str = Field(..., min_length=5, max_length=10)
    elomrade: Elomrade
    annual_kwh: float = Field(..., gt=0)
    has_existing_solar: bool = False
    interest_type: InterestType
    budget: Budget
    timeline: Timeline
    calculation_snapshot: dict[str, Any] | None = None
    source: str | None = Field(None, max_length=100)


class LeadCreatedResponse(BaseModel):
    lead_id: int
    matched_companies: int


class LeadMatchResponse(BaseModel):
    company_id: int
    company_name: str
    notified_at: datetime | None
    notification_method: str | None


class LeadResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    property_type: PropertyType
    postal_code: str
    elomrade: Elomrade
    annual_kwh: float
    has_existing_solar: bool
    interest_type: InterestType
    budget: Budget
    timeline: Timeline
    source: str | None
    status: LeadStatus
    matches: list[LeadMatchResponse] = []
    created_at: datetime


class LeadStatusUpdate(BaseModel):
    status: LeadStatus


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str | None = None
    webhook_url: str | None = None
    accepts_battery: bool = True
    accepts_solar: bool = False
    max_leads_per_day: int = Field(10, ge=1, le=1000)
    service_area_polygon: dict[str, Any] | None = None


class CompanyUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    webhook_url: str | None = None
    accepts_battery: bool | None = None
    accepts_solar: bool | None = None
    max_leads_per_day: int | None = Field(None, ge=1, le=1000)
    service_area_polygon: dict[str, Any] | None = None


class CompanyResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None
    webhook_url: str | None
    accepts_battery: bool
    accepts_solar: bool
    is_active: bool
    max_leads_per_day: int
    leads_today: int
    match_count: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}
