"""Postal code zones and consumption profile presets."""

import pytest

from kalkyla.calculations.elomrade import format_postal_code, get_elomrade_from_postal_code, is_valid_postal_code
from kalkyla.calculations.presets import (
    SYSTEM_PRESETS,
    apply_preset,
    calculate_profile_total,
    create_empty_profile,
    get_preset_by_id,
    scale_profile_to_total,
)
from kalkyla.db.models.enums import Elomrade


@pytest.mark.parametrize(
    "code,zone",
    [
        ("95000", Elomrade.SE1),
        ("98999", Elomrade.SE1),
        ("94999", Elomrade.SE3),
        ("80000", Elomrade.SE2),
        ("20000", Elomrade.SE4),
        ("39999", Elomrade.SE4),
        ("40000", Elomrade.SE3),
        ("99999", Elomrade.SE3),
        ("114 55", Elomrade.SE3),
    ],
)
def test_zone_boundaries(code, zone):
    assert get_elomrade_from_postal_code(code) == zone


@pytest.mark.parametrize("code", ["", "1234", "123456", "12a45"])
def test_invalid_codes(code):
    assert get_elomrade_from_postal_code(code) is None
    assert is_valid_postal_code(code) is False
    assert format_postal_code(code) == code


def test_format_postal_code():
    assert format_postal_code("11455") == "114 55"
    assert format_postal_code(" 114 55 ") == "114 55"


@pytest.mark.parametrize("preset", SYSTEM_PRESETS, ids=lambda p: p.id)
def test_presets_preserve_annual_total(preset):
    profile = apply_preset(preset, 15000)
    assert len(profile) == 12
    assert all(len(month) == 24 for month in profile)
    assert calculate_profile_total(profile) == pytest.approx(15000)


def test_heating_preset_is_seasonal():
    profile = apply_preset(get_preset_by_id("electric-heating"), 20000)
    assert sum(profile[0]) > sum(profile[6])


def test_unknown_preset():
    assert get_preset_by_id("pool-heater") is None


def test_scale_profile():
    profile = apply_preset(get_preset_by_id("ev-charging"), 10000)
    scaled = scale_profile_to_total(profile, 5000)
    assert calculate_profile_total(scaled) == pytest.approx(5000)


def test_scale_empty_profile_is_unchanged():
    empty = create_empty_profile()
    assert scale_profile_to_total(empty, 5000) == empty
