"""Organization schemas - branding and ProffsKontakt settings."""

from datetime import datetime

from pydantic import BaseModel, Field

from kalkyla.schemas.common import HEX_COLOR, SLUG
from kalkyla.schemas.user import UserResponse


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    slug: str = Field(..., min_length=2, max_length=50, pattern=SLUG)
    logo_url: str | None = None
    primary_color: str = Field("#3B82F6", pattern=HEX_COLOR)
    secondary_color: str = Field("#1E40AF", pattern=HEX_COLOR)
    is_proffskontakt_affiliated: bool = False
    installer_fixed_cut: float | None = Field(None, ge=0)
    margin_alert_threshold: float | None = Field(None, ge=0)


class OrganizationUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    logo_url: str | None = None
    primary_color: str | None = Field(None, pattern=HEX_COLOR)
    secondary_color: str | None = Field(None, pattern=HEX_COLOR)
    is_proffskontakt_affiliated: bool | None = None
    installer_fixed_cut: float | None = Field(None, ge=0)
    margin_alert_threshold: float | None = Field(None, ge=0)


class OrganizationResponse(BaseModel):
    id: int
    name: str
    slug: str
    logo_url: str | None
    primary_color: str
    secondary_color: str
    is_proffskontakt_affiliated: bool
    installer_fixed_cut: float | None
    margin_alert_threshold: float | None
    created_at: datetime

    model_config = {"from_attributes": True}


class OrganizationListItem(OrganizationResponse):
    user_count: int = 0


class OrganizationDetail(OrganizationResponse):
    users: list[UserResponse] = []


class OrganizationStats(BaseModel):
    id: int
    name: str
    slug: str
    calculation_count: int
    active_user_count: int
    total_views: int
