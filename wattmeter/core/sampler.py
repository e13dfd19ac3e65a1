"""Power sampling - converts raw battery counters to watts."""

from pathlib import Path
from typing import Optional

from wattmeter.core.resolver import candidate_dirs
from wattmeter.core.types import POWER_SUPPLY_DIR, ResolvedBattery
from wattmeter.providers.sysfs import (
    CURRENT_NOW, POWER_NOW, VOLTAGE_NOW, has_attribute, read_micro, read_status,
)


def battery_power(battery_dir: Path, direct: bool) -> Optional[float]:
    """Power of one battery in watts, or None if a counter is missing.

    Direct mode reads ``power_now``; derived mode multiplies ``current_now``
    and ``voltage_now``. Signs are passed through unchanged.
    """
    if direct:
        return read_micro(battery_dir / POWER_NOW)

    current = read_micro(battery_dir / CURRENT_NOW)
    voltage = read_micro(battery_dir / VOLTAGE_NOW)
    if current is None or voltage is None:
        return None
    return current * voltage


def combined_power(root: Path = POWER_SUPPLY_DIR) -> float:
    """Sum the power of every candidate battery that reports a status.

    Each battery's mode is probed on its own. Batteries without a usable
    reading add nothing to the total.
    """
    total = 0.0
    for battery_dir in candidate_dirs(root):
        if read_status(battery_dir) is None:
            continue
        reading = battery_power(battery_dir, has_attribute(battery_dir, POWER_NOW))
        if reading is not None:
            total += reading
    return total


def sample(resolved: ResolvedBattery, combine: bool,
           root: Path = POWER_SUPPLY_DIR) -> Optional[float]:
    """Current power draw in watts.

    In single-battery mode a missing counter yields None; in combine mode
    the total is always a number.
    """
    if combine:
        return combined_power(root)
    if not resolved.valid:
        return None
    return battery_power(resolved.path, resolved.direct)
