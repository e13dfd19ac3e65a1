"""Core of the battery power meter: resolve, sample, format, schedule."""

from wattmeter.core.types import (
    CANDIDATES,
    INVALID_BATTERY,
    POWER_SUPPLY_DIR,
    DisplayOptions,
    PowerReading,
    ResolvedBattery,
)
from wattmeter.core.resolver import BatteryState, resolve
from wattmeter.core.sampler import sample
from wattmeter.core.formatter import format_status, render_label
from wattmeter.core.label import PowerLabel
from wattmeter.core.scheduler import AttachmentRetry, PeriodicSync, TimerBackend
from wattmeter.core.meter import Wattmeter

__all__ = [
    "CANDIDATES",
    "INVALID_BATTERY",
    "POWER_SUPPLY_DIR",
    "DisplayOptions",
    "PowerReading",
    "ResolvedBattery",
    "BatteryState",
    "resolve",
    "sample",
    "format_status",
    "render_label",
    "PowerLabel",
    "AttachmentRetry",
    "PeriodicSync",
    "TimerBackend",
    "Wattmeter",
]
