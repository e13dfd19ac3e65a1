"""Wattmeter - battery power draw in the system tray."""

__version__ = "0.3.0"
