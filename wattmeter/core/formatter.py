"""Label text for a battery status and power value."""

import logging
import math
from typing import Optional

from wattmeter.core.types import DisplayOptions, ResolvedBattery

log = logging.getLogger(__name__)

WARNING_LABEL = " ⚠ "
PLACEHOLDER_LABEL = "Calculating…"

_CHARGING = " +{} W "
_DISCHARGING_SIGNED = " -{} W "
_DISCHARGING = " {} W "
_UNKNOWN = " ? "
_NOT_AVAILABLE = " N/A "


def format_magnitude(power: float, pad_single_digit: bool) -> str:
    """Absolute watts rounded half up, optionally zero-padded to two digits."""
    text = str(int(math.floor(abs(power) + 0.5)))
    if pad_single_digit:
        return text.zfill(2)
    return text


def _not_available(options: DisplayOptions) -> str:
    return "" if options.hide_not_available else _NOT_AVAILABLE


def format_status(status: str, power: Optional[float], options: DisplayOptions) -> str:
    """Map a sysfs status string and power reading to label text.

    Status is matched by substring, in order: Full, Charging, Discharging,
    Unknown. Anything else is "not available". A charging or discharging
    battery without a power reading is shown as not available too.
    """
    if power is not None and not math.isfinite(power):
        power = None

    # "Discharging" does not contain "Charging" (case differs).
    if "Full" in status:
        return ""

    if "Charging" in status:
        if power is None:
            return _not_available(options)
        return _CHARGING.format(format_magnitude(power, options.pad_single_digit))

    if "Discharging" in status:
        if power is None:
            return _not_available(options)
        template = _DISCHARGING_SIGNED if options.show_minus_sign else _DISCHARGING
        return template.format(format_magnitude(power, options.pad_single_digit))

    if "Unknown" in status:
        return _UNKNOWN

    return _not_available(options)


def render_label(resolved: ResolvedBattery, status: str, power: Optional[float],
                 options: DisplayOptions) -> str:
    """Label text for a tick; an unresolved battery always shows a warning."""
    if not resolved.valid:
        log.warning("Can't find battery, showing warning label")
        return WARNING_LABEL
    return format_status(status, power, options)
