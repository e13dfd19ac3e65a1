"""Timer-driven tasks: waiting for the tray to appear, and the sampling tick.

Both tasks are cooperative: they run on the event loop thread and never
block. All timers go through a TimerBackend; the Qt host supplies one on QTimer.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Callable, Optional

from wattmeter.core.label import PowerLabel

log = logging.getLogger(__name__)

MAX_RETRIES = 5
RETRY_DELAY_SECONDS = 2


class TimerBackend(ABC):
    """Source of one-shot and repeating timeouts."""

    @abstractmethod
    def add_timeout(self, seconds: int, callback: Callable[[], None],
                    repeat: bool = False) -> Any:
        """Schedule ``callback`` after ``seconds`` and return a handle."""
        ...

    @abstractmethod
    def remove(self, handle: Any) -> None:
        """Cancel a scheduled timeout. Unknown or fired handles are ignored."""
        ...


class DiscoveryState(Enum):
    SEARCHING = auto()
    FOUND = auto()
    EXHAUSTED = auto()


class AttachmentRetry:
    """Bounded retry loop waiting for the host attachment point.

    ``probe`` returns a handle when the attachment point exists, else None.
    On success ``on_found(handle)`` is called once. After ``max_retries``
    scheduled retries the loop gives up for the rest of the run.
    """

    def __init__(self, probe: Callable[[], Optional[Any]],
                 on_found: Callable[[Any], None],
                 timers: TimerBackend,
                 max_retries: int = MAX_RETRIES,
                 retry_delay: int = RETRY_DELAY_SECONDS):
        self._probe = probe
        self._on_found = on_found
        self._timers = timers
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._retry_count = 0
        self._pending = None
        self.state = DiscoveryState.SEARCHING

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def start(self) -> None:
        """Probe now, replacing any attempt already scheduled."""
        if self.state is not DiscoveryState.SEARCHING:
            log.debug("Attachment search already finished (%s)", self.state.name)
            return
        self.cancel()
        self._attempt()

    def cancel(self) -> None:
        if self._pending is not None:
            self._timers.remove(self._pending)
            self._pending = None

    def _on_timeout(self) -> None:
        self._pending = None
        self._attempt()

    def _attempt(self) -> None:
        handle = self._probe()
        if handle is not None:
            self.state = DiscoveryState.FOUND
            self._on_found(handle)
            return

        if self._retry_count < self._max_retries:
            self._retry_count += 1
            self.cancel()
            self._pending = self._timers.add_timeout(self._retry_delay, self._on_timeout)
            return

        self.state = DiscoveryState.EXHAUSTED
        log.error("Failed to find the system tray after %d retries.", self._max_retries)


class SyncState(Enum):
    IDLE = auto()
    ARMED = auto()


class PeriodicSync:
    """Repeating task that renders the pipeline into a label.

    ``render`` samples and formats; ``interval`` is read on every ``start``.
    At most one tick is pending per instance.
    """

    def __init__(self, label: PowerLabel, render: Callable[[], str],
                 interval: Callable[[], int], timers: TimerBackend):
        self._label = label
        self._render = render
        self._interval = interval
        self._timers = timers
        self._handle = None

    @property
    def state(self) -> SyncState:
        return SyncState.IDLE if self._handle is None else SyncState.ARMED

    def start(self) -> None:
        self.stop()
        seconds = self._interval()
        self._handle = self._timers.add_timeout(seconds, self.sync, repeat=True)
        log.debug("Sampling every %ds", seconds)

    def stop(self) -> None:
        if self._handle is not None:
            self._timers.remove(self._handle)
            self._handle = None

    def sync(self) -> None:
        """Run one tick now: sample, format, then publish."""
        self._label.text = self._render()
