"""sysfs counter access - reads /sys/class/power_supply/<battery>/ attributes.

Every attribute that is missing, unreadable, empty, not numeric or not finite comes back
as None. Callers compare against None; nothing here raises.
"""

import logging
import math
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

# Counters are integers in micro-units (uW, uA, uV).
MICRO = 1000000

STATUS = "status"
POWER_NOW = "power_now"
CURRENT_NOW = "current_now"
VOLTAGE_NOW = "voltage_now"


def read_sysfs(path: Path) -> Optional[str]:
    """Read a sysfs attribute file, returning stripped content or None."""
    try:
        content = path.read_text().strip()
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Cannot read %s: %s", path, e)
        return None
    return content or None


def has_attribute(battery_dir: Path, name: str) -> bool:
    """Whether the attribute is present and non-empty."""
    return read_sysfs(battery_dir / name) is not None


def read_status(battery_dir: Path) -> Optional[str]:
    return read_sysfs(battery_dir / STATUS)


def read_micro(path: Path) -> Optional[float]:
    """Read a micro-unit counter and scale it to whole units."""
    raw = read_sysfs(path)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        log.debug("Non-numeric value in %s: %r", path, raw)
        return None
    if not math.isfinite(value):
        log.debug("Non-finite value in %s: %r", path, raw)
        return None
    return value / MICRO
