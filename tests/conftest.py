from pathlib import Path

import pytest

from wattmeter.core.scheduler import TimerBackend


class FakeTimers(TimerBackend):
    """Manual clock: nothing fires until the test calls ``fire``."""

    def __init__(self):
        self.pending = {}
        self.scheduled = []
        self._next = 1

    def add_timeout(self, seconds, callback, repeat=False):
        handle = self._next
        self._next += 1
        self.pending[handle] = (seconds, callback, repeat)
        self.scheduled.append((handle, seconds, repeat))
        return handle

    def remove(self, handle):
        self.pending.pop(handle, None)

    def fire(self, handle):
        seconds, callback, repeat = self.pending[handle]
        if not repeat:
            del self.pending[handle]
        callback()

    def fire_next(self):
        self.fire(min(self.pending))


class FakeSettings:
    """Dict-backed settings with the change-notification contract."""

    def __init__(self, **values):
        self.values = {
            "battery": 0,
            "combine-batteries": False,
            "hide-na": False,
            "show-minus-sign": False,
            "pad-single-digit": False,
            "interval": 5,
        }
        self.values.update(values)
        self.handlers = {}
        self._next = 1

    def get_int(self, key):
        return int(self.values[key])

    def get_boolean(self, key):
        return bool(self.values[key])

    def set(self, key, value):
        self.values[key] = value
        for signal, callback in list(self.handlers.values()):
            if signal in ("changed", "changed::" + key):
                callback(key)

    def connect(self, signal, callback):
        handler_id = self._next
        self._next += 1
        self.handlers[handler_id] = (signal, callback)
        return handler_id

    def disconnect(self, handler_id):
        self.handlers.pop(handler_id, None)


def make_battery(root: Path, name: str, status="Discharging", **counters) -> Path:
    """Create a fake power_supply directory; counters are raw file contents."""
    battery = root / name
    battery.mkdir(parents=True, exist_ok=True)
    if status is not None:
        (battery / "status").write_text(status + "\n")
    for attr, value in counters.items():
        (battery / attr).write_text(f"{value}\n")
    return battery


@pytest.fixture
def timers():
    return FakeTimers()


@pytest.fixture
def settings():
    return FakeSettings()
