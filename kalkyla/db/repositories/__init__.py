# Repository pattern: data access per aggregate

from kalkyla.db.repositories.battery_repository import BatteryBrandRepository, BatteryConfigRepository
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.db.repositories.electricity_repository import (
    ElectricityPriceRepository,
    QuarterlyPriceRepository,
)
from kalkyla.db.repositories.lead_repository import CompanyRepository, LeadRepository
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.repositories.password_reset_repository import PasswordResetRepository
from kalkyla.db.repositories.user_repository import UserRepository

__all__ = [
    "BatteryBrandRepository",
    "BatteryConfigRepository",
    "CalculationRepository",
    "CompanyRepository",
    "ElectricityPriceRepository",
    "LeadRepository",
    "NatagareRepository",
    "OrganizationRepository",
    "PasswordResetRepository",
    "QuarterlyPriceRepository",
    "UserRepository",
]
