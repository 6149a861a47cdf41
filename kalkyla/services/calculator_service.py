"""Public calculator helpers: ad-hoc ROI, postal code lookup and consumption presets."""

from decimal import Decimal

from kalkyla.calculations import CalculationInputs, calculate_battery_roi
from kalkyla.calculations.elomrade import format_postal_code, get_elomrade_from_postal_code, is_valid_postal_code
from kalkyla.calculations.engine import BatterySpec
from kalkyla.calculations.presets import (
    SYSTEM_PRESETS,
    ConsumptionPreset,
    apply_preset,
    calculate_profile_total,
    get_preset_by_id,
    scale_profile_to_total,
)
from kalkyla.core.errors import DomainValidationError, NotFoundError
from kalkyla.schemas.calculator import (
    ApplyPresetRequest,
    ElomradeLookupResponse,
    PresetResponse,
    ProfileResponse,
    RoiRequest,
    RoiResponse,
    ScaleProfileRequest,
)


def _d(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def calculate_roi(data: RoiRequest) -> RoiResponse:
    inputs = CalculationInputs(
        battery=BatterySpec(
            capacity_kwh=_d(data.capacity_kwh),
            max_discharge_kw=_d(data.max_discharge_kw),
            charge_efficiency=_d(data.charge_efficiency),
            discharge_efficiency=_d(data.discharge_efficiency),
            warranty_years=data.warranty_years,
            guaranteed_cycles=data.guaranteed_cycles,
        ),
        day_price_ore=_d(data.day_price_ore),
        night_price_ore=_d(data.night_price_ore),
        effect_tariff_day_rate=_d(data.effect_tariff_day_rate),
        total_price_ex_vat=_d(data.total_price_ex_vat),
        installation_cost=_d(data.installation_cost),
        cycles_per_day=_d(data.cycles_per_day),
        avg_discharge_percent=_d(data.avg_discharge_percent),
        grid_services_rate_per_kw_year=_d(data.grid_services_rate_per_kw_year),
        peak_shaving_percent=_d(data.peak_shaving_percent),
        current_peak_kw=_d(data.current_peak_kw),
        post_campaign_rate_per_kw_year=_d(data.post_campaign_rate_per_kw_year),
        elomrade=data.elomrade.value if data.elomrade else None,
        is_emaldo_battery=data.is_emaldo_battery,
        total_projection_years=data.total_projection_years,
    )
    return RoiResponse(results=calculate_battery_roi(inputs))


def lookup_elomrade(postal_code: str) -> ElomradeLookupResponse:
    return ElomradeLookupResponse(
        postal_code=postal_code,
        formatted=format_postal_code(postal_code),
        valid=is_valid_postal_code(postal_code),
        elomrade=get_elomrade_from_postal_code(postal_code),
    )


def _preset_response(preset: ConsumptionPreset) -> PresetResponse:
    return PresetResponse(
        id=preset.id,
        name=preset.name,
        description=preset.description,
        hourly_pattern=list(preset.hourly_pattern),
        monthly_factors=list(preset.monthly_factors),
    )


def list_presets() -> list[PresetResponse]:
    return [_preset_response(p) for p in SYSTEM_PRESETS]


def preset_profile(data: ApplyPresetRequest) -> ProfileResponse:
    preset = get_preset_by_id(data.preset_id)
    if preset is None:
        raise NotFoundError("Förinställningen hittades inte")
    profile = apply_preset(preset, data.annual_kwh)
    return ProfileResponse(data=profile, total_kwh=calculate_profile_total(profile))


def scale_profile(data: ScaleProfileRequest) -> ProfileResponse:
    if len(data.data) != 12 or any(len(month) != 24 for month in data.data):
        raise DomainValidationError("Profilen måste vara 12 månader x 24 timmar")
    profile = scale_profile_to_total(data.data, data.target_annual_kwh)
    return ProfileResponse(data=profile, total_kwh=calculate_profile_total(profile))
