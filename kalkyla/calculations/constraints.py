"""
Physical limits of the battery applied to the savings model.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PeakShavingResult:
    target_kw: float
    actual_kw: float
    new_peak_kw: float
    is_constrained: bool
    constraint_message: str | None


@dataclass(frozen=True)
class WarrantyLifeResult:
    years_at_current_cycles: float
    exceeds_warranty: bool
    warning_message: str | None


def calculate_actual_peak_shaving(
    current_peak_kw: float, target_percent: float, battery_max_discharge_kw: float
) -> PeakShavingResult:
    """The battery cannot shave more than it can deliver: min(peak x pct, max discharge)."""
    target_kw = current_peak_kw * (target_percent / 100)
    actual_kw = min(target_kw, battery_max_discharge_kw)
    is_constrained = actual_kw < target_kw
    message = None
    if is_constrained:
        message = f"Batteriet kan max leverera {battery_max_discharge_kw:.1f} kW. Mål: {target_kw:.1f} kW."
    return PeakShavingResult(
        target_kw=target_kw,
        actual_kw=actual_kw,
        new_peak_kw=current_peak_kw - actual_kw,
        is_constrained=is_constrained,
        constraint_message=message,
    )


def calculate_warranty_life_at_cycles(
    cycles_per_day: float, warranty_years: int, guaranteed_cycles: int
) -> WarrantyLifeResult:
    """How many years the guaranteed cycle count lasts at the chosen cycling rate."""
    years = guaranteed_cycles / (cycles_per_day * 365)
    exceeds = years < warranty_years
    message = None
    if exceeds:
        message = (
            f"Vid {cycles_per_day:g} cykler/dag räcker garanterade cykler i {years:.1f} år "
            f"(garanti: {warranty_years} år)"
        )
    return WarrantyLifeResult(years_at_current_cycles=years, exceeds_warranty=exceeds, warning_message=message)
