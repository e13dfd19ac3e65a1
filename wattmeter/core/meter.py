"""Wattmeter - the sampling pipeline bound to a settings object."""

import logging
from pathlib import Path
from typing import Optional

from wattmeter.core.formatter import render_label
from wattmeter.core.label import PowerLabel
from wattmeter.core.resolver import BatteryState
from wattmeter.core.sampler import sample
from wattmeter.core.types import (
    POWER_SUPPLY_DIR, DisplayOptions, PowerReading, ResolvedBattery,
)
from wattmeter.providers.sysfs import read_status

log = logging.getLogger(__name__)


class Wattmeter:
    """Pure-Python pipeline core without Qt dependency.

    Resolves the battery once from settings and again whenever the
    ``battery`` setting changes. ``render`` is one sampling pass. Used
    directly by the CLI and driven by timers in the tray.
    """

    def __init__(self, settings, root: Path = POWER_SUPPLY_DIR,
                 label: Optional[PowerLabel] = None):
        self._settings = settings
        self._root = root
        self.label = label if label is not None else PowerLabel()
        self._state = BatteryState(root)
        self._state.recompute(settings.get_int("battery"))
        self._handler_id = settings.connect("changed::battery", self._on_battery_changed)

    @property
    def resolved(self) -> ResolvedBattery:
        return self._state.resolved

    def options(self) -> DisplayOptions:
        return DisplayOptions.from_settings(self._settings)

    def reading(self) -> PowerReading:
        """Sample once and return everything that went into the label."""
        resolved = self._state.resolved
        options = self.options()
        status = None
        if resolved.valid:
            status = read_status(resolved.path) or "Unknown"
        watts = sample(resolved, options.combine_batteries, self._root)
        label = render_label(resolved, status or "Unknown", watts, options)
        return PowerReading(
            path=resolved.path,
            direct=resolved.direct,
            status=status,
            watts=watts,
            label=label,
        )

    def render(self) -> str:
        return self.reading().label

    def sync(self) -> None:
        """Publish one pass into the label."""
        self.label.text = self.render()

    def close(self) -> None:
        if self._handler_id is not None:
            self._settings.disconnect(self._handler_id)
            self._handler_id = None

    def _on_battery_changed(self, key: str) -> None:
        self._state.recompute(self._settings.get_int("battery"))
        self.sync()
