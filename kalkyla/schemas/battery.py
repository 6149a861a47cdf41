"""Battery brand/config schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class BatteryBrandCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    logo_url: str | None = None


class BatteryBrandUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    logo_url: str | None = None


class BatteryBrandResponse(BaseModel):
    id: int
    org_id: int
    name: str
    logo_url: str | None
    config_count: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}


class BatteryConfigBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    brand_id: int
    capacity_kwh: float = Field(..., gt=0)
    max_discharge_kw: float = Field(..., gt=0)
    max_charge_kw: float = Field(..., gt=0)
    charge_efficiency: float = Field(..., ge=0, le=100)
    discharge_efficiency: float = Field(..., ge=0, le=100)
    warranty_years: int = Field(..., gt=0)
    guaranteed_cycles: int = Field(..., gt=0)
    degradation_per_year: float = Field(..., ge=0, le=100)
    cost_price: float = Field(..., ge=0)
    is_extension_cabinet: bool = False
    is_new_stack: bool = True


class BatteryConfigCreate(BatteryConfigBase):
    pass


class BatteryConfigUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    brand_id: int | None = None
    capacity_kwh: float | None = Field(None, gt=0)
    max_discharge_kw: float | None = Field(None, gt=0)
    max_charge_kw: float | None = Field(None, gt=0)
    charge_efficiency: float | None = Field(None, ge=0, le=100)
    discharge_efficiency: float | None = Field(None, ge=0, le=100)
    warranty_years: int | None = Field(None, gt=0)
    guaranteed_cycles: int | None = Field(None, gt=0)
    degradation_per_year: float | None = Field(None, ge=0, le=100)
    cost_price: float | None = Field(None, ge=0)
    is_extension_cabinet: bool | None = None
    is_new_stack: bool | None = None
    is_active: bool | None = None


class BatteryConfigResponse(BatteryConfigBase):
    id: int
    org_id: int
    brand_name: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
