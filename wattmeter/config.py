"""Configuration management for the wattmeter.

Settings live in a flat JSON file and can change while the tray is running;
interested code subscribes with ``Settings.connect("changed::<key>", cb)``.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

log = logging.getLogger(__name__)

# Default configuration values
DEFAULTS = {
    "battery": 0,  # 0 = automatic, N = N-th candidate battery
    "combine-batteries": False,  # Sum all batteries instead of one
    "hide-na": False,  # Show nothing instead of " N/A "
    "show-minus-sign": False,  # Prefix discharge wattage with "-"
    "pad-single-digit": False,  # " 07 W " instead of " 7 W "
    "interval": 5,  # Seconds between samples
}

_CHANGED_PREFIX = "changed::"


def get_config_dir() -> Path:
    """Get the configuration directory, creating it if needed."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        config_dir = Path(xdg_config) / "wattmeter"
    else:
        config_dir = Path.home() / ".config" / "wattmeter"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / "config.json"


def read_config(config_path: Path) -> Optional[dict]:
    """Read the config file merged over defaults, or None if it can't be decoded."""
    try:
        with open(config_path, "r") as f:
            user_config = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Could not load config from %s: %s", config_path, e)
        return None
    if not isinstance(user_config, dict):
        log.warning("Ignoring config %s: not a JSON object", config_path)
        return None
    return {**DEFAULTS, **user_config}


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from file, merging with defaults."""
    config_path = config_path or get_config_path()

    if config_path.exists():
        config = read_config(config_path)
        return config if config is not None else dict(DEFAULTS)

    # Create default config file on first run
    save_config(DEFAULTS, config_path)
    return dict(DEFAULTS)


def save_config(config: dict, config_path: Optional[Path] = None) -> bool:
    """Save configuration to file."""
    config_path = config_path or get_config_path()

    try:
        with open(config_path, "w") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        log.error("Could not save config to %s: %s", config_path, e)
        return False


class Settings:
    """Live settings object with change notification.

    Reads always hit the in-memory copy; ``reload`` picks up edits made to
    the file by other processes and notifies for the keys that changed.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._path = config_path or get_config_path()
        self._config = load_config(self._path)
        self._handlers: Dict[int, Tuple[str, Callable[[str], None]]] = {}
        self._next_id = 1

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, DEFAULTS.get(key, default))

    def get_int(self, key: str) -> int:
        try:
            return int(self.get(key, 0))
        except (TypeError, ValueError):
            log.warning("Setting %r is not an integer, using default", key)
            return int(DEFAULTS.get(key, 0))

    def get_boolean(self, key: str) -> bool:
        return bool(self.get(key, False))

    def set(self, key: str, value: Any) -> bool:
        """Set a value, persist it and notify subscribers if it changed."""
        old = self.get(key)
        self._config[key] = value
        saved = save_config(self._config, self._path)
        if old != value:
            self._emit(key)
        return saved

    def reload(self) -> None:
        """Re-read the file and notify for every key whose value changed.

        A file that can't be decoded (e.g. caught mid-write) leaves the
        current values in place.
        """
        config = read_config(self._path)
        if config is None:
            return
        old = self._config
        self._config = config
        for key in sorted(set(old) | set(self._config)):
            if old.get(key) != self._config.get(key):
                self._emit(key)

    def connect(self, signal: str, callback: Callable[[str], None]) -> int:
        """Subscribe to ``changed::<key>`` (or ``changed`` for every key)."""
        if signal != "changed" and not signal.startswith(_CHANGED_PREFIX):
            raise ValueError(f"Unknown signal {signal!r}")
        handler_id = self._next_id
        self._next_id += 1
        self._handlers[handler_id] = (signal, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    def _emit(self, key: str) -> None:
        for signal, callback in list(self._handlers.values()):
            if signal == "changed" or signal == _CHANGED_PREFIX + key:
                try:
                    callback(key)
                except Exception:
                    log.exception("Settings handler for %r failed", key)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any):
        self.set(key, value)
