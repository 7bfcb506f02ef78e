"""Exception types raised by the CHI32 tooling.

The core pipeline itself never raises; these cover the harnesses around it.
"""


class Chi32Error(Exception):
    """Base class for CHI32 tooling errors."""


class MetadataError(Chi32Error):
    """Canonical metadata file is missing, unreadable or yields no cases."""


class ReferenceDataError(Chi32Error):
    """Reference data file is missing or shorter than the declared length."""


class UnknownStrategyError(Chi32Error, ValueError):
    """Strategy code or name is not one of sequential, swapped, feedback."""


class UnknownBatteryError(Chi32Error, ValueError):
    """Requested statistical battery is not registered."""
