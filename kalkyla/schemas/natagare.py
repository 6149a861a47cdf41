"""Grid operator schemas."""

from pydantic import BaseModel, Field


class NatagareCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    day_rate_sek_kw: float = Field(..., ge=0)
    night_rate_sek_kw: float = Field(..., ge=0)
    day_start_hour: int = Field(6, ge=0, le=23)
    day_end_hour: int = Field(22, ge=0, le=23)


class NatagareUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    day_rate_sek_kw: float | None = Field(None, ge=0)
    night_rate_sek_kw: float | None = Field(None, ge=0)
    day_start_hour: int | None = Field(None, ge=0, le=23)
    day_end_hour: int | None = Field(None, ge=0, le=23)
    is_active: bool | None = None


class NatagareResponse(BaseModel):
    id: int
    org_id: int
    name: str
    day_rate_sek_kw: float
    night_rate_sek_kw: float
    day_start_hour: int
    day_end_hour: int
    is_default: bool
    is_active: bool

    model_config = {"from_attributes": True}
