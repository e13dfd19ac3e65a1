import logging

import pytest

from wattmeter.core.formatter import (
    WARNING_LABEL, format_magnitude, format_status, render_label,
)
from wattmeter.core.types import INVALID_BATTERY, DisplayOptions, ResolvedBattery

DEFAULT = DisplayOptions()
EVERYTHING = DisplayOptions(
    combine_batteries=True, hide_not_available=True,
    show_minus_sign=True, pad_single_digit=True,
)


@pytest.mark.parametrize("options", [DEFAULT, EVERYTHING])
def test_full_is_empty(options):
    assert format_status("Full", 37.2, options) == ""


def test_charging_always_has_plus_sign():
    assert format_status("Charging", 23.6, DEFAULT) == " +24 W "
    assert format_status("Charging", -23.6, EVERYTHING) == " +24 W "


def test_discharging_with_minus_sign_and_padding():
    options = DisplayOptions(show_minus_sign=True, pad_single_digit=True)
    assert format_status("Discharging", 7.0, options) == " -07 W "


def test_discharging_plain():
    options = DisplayOptions(show_minus_sign=False, pad_single_digit=False)
    assert format_status("Discharging", 7.0, options) == " 7 W "


def test_discharging_uses_magnitude():
    assert format_status("Discharging", -11.2, DEFAULT) == " 11 W "


@pytest.mark.parametrize("power", [0.0, 12.0, None])
def test_unknown(power):
    assert format_status("Unknown", power, DEFAULT) == " ? "
    assert format_status("Unknown", power, EVERYTHING) == " ? "


def test_not_available():
    assert format_status("Weird", 0, DisplayOptions(hide_not_available=True)) == ""
    assert format_status("Weird", 0, DisplayOptions(hide_not_available=False)) == " N/A "


def test_not_charging_is_not_available():
    assert format_status("Not charging", 3.0, DEFAULT) == " N/A "


def test_substring_match():
    assert format_status("Charging (fast)", 45.0, DEFAULT) == " +45 W "


def test_missing_power_is_not_shown_as_number():
    assert format_status("Discharging", None, DEFAULT) == " N/A "
    assert format_status("Charging", None, DisplayOptions(hide_not_available=True)) == ""


@pytest.mark.parametrize("power, pad, expected", [
    (0.4, False, "0"),
    (0.5, False, "1"),
    (2.5, False, "3"),
    (9.49, True, "09"),
    (9.5, True, "10"),
    (123.0, True, "123"),
])
def test_format_magnitude(power, pad, expected):
    assert format_magnitude(power, pad) == expected


def test_invalid_battery_shows_warning(caplog):
    with caplog.at_level(logging.WARNING):
        assert render_label(INVALID_BATTERY, "Charging", 10.0, DEFAULT) == WARNING_LABEL
    assert "Can't find battery" in caplog.text


def test_valid_battery_delegates(tmp_path):
    resolved = ResolvedBattery(path=tmp_path, direct=True)
    assert render_label(resolved, "Charging", 10.0, DEFAULT) == " +10 W "


@pytest.mark.parametrize("power", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_power_is_not_shown_as_number(power):
    assert format_status("Discharging", power, DEFAULT) == " N/A "
    assert format_status("Charging", power, DisplayOptions(hide_not_available=True)) == ""
