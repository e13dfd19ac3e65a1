"""Battery path resolution - which candidate directory is "the battery"."""

import logging
from pathlib import Path

from wattmeter.core.types import (
    AUTOMATIC, CANDIDATES, INVALID_BATTERY, POWER_SUPPLY_DIR,
    BatterySelection, ResolvedBattery,
)
from wattmeter.providers.sysfs import POWER_NOW, has_attribute, read_status

log = logging.getLogger(__name__)


def candidate_dirs(root: Path = POWER_SUPPLY_DIR):
    """Candidate directories in priority order."""
    return [root / name for name in CANDIDATES]


def _probe(battery_dir: Path) -> ResolvedBattery:
    return ResolvedBattery(path=battery_dir, direct=has_attribute(battery_dir, POWER_NOW))


def resolve(selection: BatterySelection, root: Path = POWER_SUPPLY_DIR) -> ResolvedBattery:
    """Resolve a battery selection to a candidate directory and measuring mode.

    Automatic selection takes the first candidate with a non-empty ``status``.
    A manual selection is authoritative: if the chosen candidate is missing
    there is no fallback to the others.
    """
    candidates = candidate_dirs(root)

    if selection == AUTOMATIC:
        for battery_dir in candidates:
            if read_status(battery_dir) is not None:
                return _probe(battery_dir)
        log.error("No valid battery path found for automatic setting.")
        return INVALID_BATTERY

    index = selection - 1
    if 0 <= index < len(candidates):
        battery_dir = candidates[index]
        if read_status(battery_dir) is not None:
            return _probe(battery_dir)

    log.error("No valid battery path found for battery %s.", selection)
    return INVALID_BATTERY


class BatteryState:
    """Owner of the current ResolvedBattery.

    The value is only ever replaced as a whole by ``recompute``.
    """

    def __init__(self, root: Path = POWER_SUPPLY_DIR):
        self._root = root
        self._resolved = INVALID_BATTERY

    @property
    def resolved(self) -> ResolvedBattery:
        return self._resolved

    def recompute(self, selection: BatterySelection) -> ResolvedBattery:
        resolved = resolve(selection, self._root)
        self._resolved = resolved
        if resolved.valid:
            mode = "direct" if resolved.direct else "derived"
            log.info("Using battery %s (%s power)", resolved.path, mode)
        return resolved
