"""Dashboard schemas."""

from pydantic import BaseModel

from kalkyla.schemas.calculation import CalculationListItem


class DashboardStats(BaseModel):
    total_calculations: int
    total_views: int
    recent_calculations: list[CalculationListItem]
