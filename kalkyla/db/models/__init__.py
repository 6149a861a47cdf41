from kalkyla.db.models.battery import BatteryBrand, BatteryConfig
from kalkyla.db.models.calculation import (
    Calculation,
    CalculationBattery,
    CalculationVariant,
    CalculationView,
)
from kalkyla.db.models.electricity import ElectricityPrice, ElectricityPriceQuarterly
from kalkyla.db.models.lead import Company, Lead, LeadCompanyMatch
from kalkyla.db.models.natagare import Natagare
from kalkyla.db.models.organization import Organization
from kalkyla.db.models.password_reset import PasswordResetToken
from kalkyla.db.models.user import User

__all__ = [
    "BatteryBrand",
    "BatteryConfig",
    "Calculation",
    "CalculationBattery",
    "CalculationVariant",
    "CalculationView",
    "Company",
    "ElectricityPrice",
    "ElectricityPriceQuarterly",
    "Lead",
    "LeadCompanyMatch",
    "Natagare",
    "Organization",
    "PasswordResetToken",
    "User",
]
