"""Swedish market defaults and regulatory rates used by the engine."""

from decimal import Decimal

# Tax and incentive rates
VAT_RATE = Decimal("0.25")
GRON_TEKNIK_RATE = Decimal("0.485")

# Calculation defaults
DEFAULT_GRID_SERVICES_RATE = Decimal("500")  # SEK/kW/year
DEFAULT_CYCLES_PER_DAY = Decimal("1")
DEFAULT_AVG_DISCHARGE_PERCENT = Decimal("85")
DEFAULT_ANNUAL_CONSUMPTION_KWH = Decimal("20000")
DEFAULT_PEAK_SHAVING_PERCENT = 50
DEFAULT_PROJECTION_YEARS = 10

# Day window, same as the default grid operators
DEFAULT_DAY_START_HOUR = 6
DEFAULT_DAY_END_HOUR = 22

DAYS_PER_YEAR = 365
PAYBACK_NEVER = Decimal("999")

# Emaldo stödtjänster campaign: guaranteed monthly income per zone (SEK)
EMALDO_CAMPAIGN_MONTHS = 36
EMALDO_STODTJANSTER_RATES = {
    "SE1": Decimal("1100"),
    "SE2": Decimal("1100"),
    "SE3": Decimal("1300"),
    "SE4": Decimal("1300"),
}
