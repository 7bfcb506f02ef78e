"""Statistical test-suite adapter for CHI32."""

from .adapter import BATTERIES, BatteryReport, BatteryConfig, Chi32Source, get_battery, run_battery
from .checks import CHECKS, TestOutcome

__all__ = [
    "BATTERIES",
    "BatteryConfig",
    "BatteryReport",
    "Chi32Source",
    "get_battery",
    "run_battery",
    "CHECKS",
    "TestOutcome",
]
