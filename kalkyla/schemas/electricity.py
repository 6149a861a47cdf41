"""Electricity price schemas."""

import datetime as dt

from pydantic import BaseModel, model_validator

from kalkyla.db.models.enums import Elomrade


class QuarterlyPriceResponse(BaseModel):
    elomrade: Elomrade
    year: int
    quarter: int
    avg_day_price_ore: float
    avg_night_price_ore: float
    avg_price_ore: float

    model_config = {"from_attributes": True}


class FetchResult(BaseModel):
    date: dt.date
    count: int


class BackfillRequest(BaseModel):
    start_date: dt.date
    end_date: dt.date

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if (self.end_date - self.start_date).days > 366:
            raise ValueError("Backfill is limited to one year per request")
        return self


class BackfillResult(BaseModel):
    total_days: int
    successful_days: int
    total_records: int


class RecalculateResult(BaseModel):
    year: int
    quarter: int
    updated: list[Elomrade]
    errors: dict[str, str] = {}
