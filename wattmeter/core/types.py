"""Core data types for the battery power meter."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Kernel power-supply class directory.
POWER_SUPPLY_DIR = Path("/sys/class/power_supply")

# Candidate battery directories. Order is the automatic-selection priority;
# selection index N picks CANDIDATES[N - 1].
CANDIDATES = ("BAT0", "BAT1", "BAT2", "sbs-5-000b")

# 0 = automatic, N > 0 = N-th candidate.
BatterySelection = int

AUTOMATIC = 0


@dataclass(frozen=True)
class ResolvedBattery:
    """Which candidate is "the battery" and how its power is measured.

    ``path`` is None when no valid candidate was found. ``direct`` means the
    directory exposes ``power_now``; otherwise power is derived from
    ``current_now * voltage_now``.
    """
    path: Optional[Path] = None
    direct: bool = False

    @property
    def valid(self) -> bool:
        return self.path is not None


INVALID_BATTERY = ResolvedBattery()


@dataclass(frozen=True)
class DisplayOptions:
    """User display rules, read fresh from settings on every pass."""
    combine_batteries: bool = False
    hide_not_available: bool = False
    show_minus_sign: bool = False
    pad_single_digit: bool = False
    interval_seconds: int = 5

    @classmethod
    def from_settings(cls, settings) -> "DisplayOptions":
        return cls(
            combine_batteries=settings.get_boolean("combine-batteries"),
            hide_not_available=settings.get_boolean("hide-na"),
            show_minus_sign=settings.get_boolean("show-minus-sign"),
            pad_single_digit=settings.get_boolean("pad-single-digit"),
            interval_seconds=max(1, settings.get_int("interval")),
        )


@dataclass(frozen=True)
class PowerReading:
    """Snapshot of one pipeline pass, for scripting output."""
    path: Optional[Path]
    direct: bool
    status: Optional[str]
    watts: Optional[float]
    label: str

    def as_dict(self) -> dict:
        return {
            "battery": str(self.path) if self.path is not None else None,
            "direct": self.direct,
            "status": self.status,
            "watts": self.watts,
            "label": self.label,
        }
