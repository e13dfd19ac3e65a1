"""Hardware access for battery counters."""

from wattmeter.providers.sysfs import (
    read_sysfs, read_status, read_micro, has_attribute,
)

__all__ = ["read_sysfs", "read_status", "read_micro", "has_attribute"]
