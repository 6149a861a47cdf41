"""
Consumption profile presets.

A profile is a 12x24 matrix: for each month, the average kWh used in each
hour of a typical day. Presets combine a relative hourly pattern with
seasonal monthly factors to spread an annual total realistically.
"""

from dataclasses import dataclass

DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class ConsumptionPreset:
    id: str
    name: str
    description: str
    hourly_pattern: tuple[float, ...]  # 24 relative weights
    monthly_factors: tuple[float, ...]  # 12 seasonal factors


SYSTEM_PRESETS: list[ConsumptionPreset] = [
    ConsumptionPreset(
        id="electric-heating",
        name="Elvärmning",
        description="Hög förbrukning vinter, låg sommar, jämn över dygnet",
        hourly_pattern=(3, 3, 2, 2, 2, 3, 5, 6, 5, 4, 4, 4, 4, 4, 4, 5, 6, 7, 6, 5, 5, 4, 4, 3),
        monthly_factors=(1.5, 1.4, 1.2, 0.9, 0.6, 0.4, 0.3, 0.4, 0.6, 0.9, 1.2, 1.5),
    ),
    ConsumptionPreset(
        id="heat-pump",
        name="Värmepump",
        description="Hög förbrukning morgon/kväll, låg mitt på dagen",
        hourly_pattern=(3, 2, 2, 2, 2, 4, 7, 8, 5, 3, 3, 3, 3, 3, 3, 4, 6, 8, 7, 5, 4, 4, 3, 3),
        monthly_factors=(1.3, 1.2, 1.0, 0.8, 0.7, 0.6, 0.6, 0.7, 0.8, 1.0, 1.2, 1.4),
    ),
    ConsumptionPreset(
        id="ev-charging",
        name="Elbilsladdning",
        description="Huvudsakligen nattetid, något kväll",
        hourly_pattern=(8, 8, 8, 8, 6, 4, 2, 1, 1, 1, 1, 1, 1, 1, 1, 1, 2, 3, 5, 6, 7, 8, 8, 8),
        monthly_factors=(1.0, 1.0, 1.0, 1.0, 1.0, 0.9, 0.8, 0.9, 1.0, 1.0, 1.1, 1.1),
    ),
    ConsumptionPreset(
        id="solar-prosumer",
        name="Solcellsproducent",
        description="Låg egenanvändning dagtid tack vare solceller",
        hourly_pattern=(5, 4, 4, 3, 3, 4, 5, 3, 1, 1, 1, 1, 1, 1, 1, 2, 4, 6, 7, 7, 6, 5, 5, 5),
        monthly_factors=(1.2, 1.1, 0.9, 0.7, 0.5, 0.4, 0.5, 0.6, 0.8, 1.0, 1.1, 1.2),
    ),
]


def apply_preset(preset: ConsumptionPreset, annual_kwh: float) -> list[list[float]]:
    """Spread annual_kwh over months by seasonal factor, then over hours by pattern."""
    pattern_sum = sum(preset.hourly_pattern)
    monthly_sum = sum(preset.monthly_factors)
    avg_monthly = annual_kwh / 12
    monthly_totals = [avg_monthly * factor * (12 / monthly_sum) for factor in preset.monthly_factors]
    return [
        [(month_total / DAYS_PER_MONTH) * (weight / pattern_sum) for weight in preset.hourly_pattern]
        for month_total in monthly_totals
    ]


def create_empty_profile() -> list[list[float]]:
    return [[0.0] * 24 for _ in range(12)]


def calculate_profile_total(profile: list[list[float]]) -> float:
    """Annual kWh; each month counts as 30 days of its typical day."""
    return sum(sum(month) * DAYS_PER_MONTH for month in profile)


def scale_profile_to_total(profile: list[list[float]], target_annual_kwh: float) -> list[list[float]]:
    current = calculate_profile_total(profile)
    if current == 0:
        return profile
    factor = target_annual_kwh / current
    return [[hour * factor for hour in month] for month in profile]


def get_preset_by_id(preset_id: str) -> ConsumptionPreset | None:
    return next((p for p in SYSTEM_PRESETS if p.id == preset_id), None)
