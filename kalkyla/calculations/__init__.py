"""Battery ROI calculation engine: formulas, physical constraints, zones and consumption profiles."""

from kalkyla.calculations.engine import CalculationInputs, calculate_battery_roi

__all__ = ["CalculationInputs", "calculate_battery_roi"]
