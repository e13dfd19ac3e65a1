#!/usr/bin/env python3
"""Command-line interface for the battery wattmeter."""

import sys
import json
import time
import logging
import argparse

import pyudev

from wattmeter.config import Settings
from wattmeter.core.meter import Wattmeter
from wattmeter.core.resolver import candidate_dirs
from wattmeter.core.types import POWER_SUPPLY_DIR
from wattmeter.providers.sysfs import POWER_NOW, has_attribute, read_status


class _Overrides:
    """Settings view with command-line values layered on top."""

    def __init__(self, settings: Settings, overrides: dict):
        self._settings = settings
        self._overrides = overrides

    def get_int(self, key):
        if key in self._overrides:
            return int(self._overrides[key])
        return self._settings.get_int(key)

    def get_boolean(self, key):
        if key in self._overrides:
            return bool(self._overrides[key])
        return self._settings.get_boolean(key)

    def connect(self, signal, callback):
        return self._settings.connect(signal, callback)

    def disconnect(self, handler_id):
        self._settings.disconnect(handler_id)


def list_power_supplies(context=None):
    """All power_supply devices known to udev, with their candidate index."""
    context = context or pyudev.Context()
    candidates = {path.name: index for index, path in enumerate(candidate_dirs(), 1)}
    result = []
    for device in context.list_devices(subsystem="power_supply"):
        name = device.sys_name
        entry = {
            "name": name,
            "type": device.properties.get("POWER_SUPPLY_TYPE", "Unknown"),
            "candidate": candidates.get(name),
        }
        if name in candidates:
            battery_dir = POWER_SUPPLY_DIR / name
            entry["status"] = read_status(battery_dir)
            entry["mode"] = "direct" if has_attribute(battery_dir, POWER_NOW) else "derived"
        result.append(entry)
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Wattmeter - Battery Power Draw",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s              Show the current power draw label
  %(prog)s --json       Output as JSON (for scripts/waybar)
  %(prog)s --list       List power supplies and battery candidates
  %(prog)s --watch      Continuously monitor power draw
  %(prog)s --battery 2  Use the second candidate battery
""",
    )
    parser.add_argument("--list", "-l", action="store_true", help="List power supplies")
    parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    parser.add_argument("--watch", "-w", action="store_true", help="Continuously monitor power draw")
    parser.add_argument(
        "--interval", "-i", type=int, default=None,
        help="Watch interval in seconds (default: from config)",
    )
    parser.add_argument(
        "--battery", "-b", type=int, default=None,
        help="Battery selection: 0 = automatic, N = N-th candidate",
    )
    parser.add_argument("--combine", "-c", action="store_true", help="Sum all batteries")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )

    if args.list:
        supplies = list_power_supplies()
        if args.json:
            print(json.dumps(supplies))
            return 0
        if not supplies:
            print("No power supplies found.")
            return 0

        print(f"Found {len(supplies)} power supply device(s):\n")
        for entry in supplies:
            print(f"  {entry['name']}")
            print(f"    Type:       {entry['type']}")
            if entry["candidate"] is not None:
                print(f"    Selection:  {entry['candidate']}")
                print(f"    Status:     {entry['status'] or 'N/A'}")
                print(f"    Mode:       {entry['mode']}")
            print()
        return 0

    overrides = {}
    if args.battery is not None:
        overrides["battery"] = args.battery
    if args.combine:
        overrides["combine-batteries"] = True
    settings = _Overrides(Settings(), overrides)
    meter = Wattmeter(settings)

    def print_status():
        reading = meter.reading()
        if args.json:
            print(json.dumps(reading.as_dict()))
        else:
            print(reading.label.strip())
        return meter.resolved.valid

    if args.watch:
        interval = max(1, args.interval or meter.options().interval_seconds)
        print(f"Monitoring power draw (every {interval}s, Ctrl+C to stop)...\n")
        try:
            while True:
                print_status()
                time.sleep(interval)
        except KeyboardInterrupt:
            print("\nStopped.")
    else:
        if not print_status():
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
