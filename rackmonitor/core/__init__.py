"""Core domain logic for the rack health monitor.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .classifier import (
    HealthClassifier,
    classify,
    is_valid_score,
    validate_thresholds,
)
from .exceptions import (
    ConfigurationError,
    RackMonitorError,
    UnknownServerError,
    WarrantyNotFoundError,
)
from .models import (
    HealthIncident,
    HealthTier,
    RequestAction,
    Server,
    SweepResult,
    Warranty,
)
from .rack_monitor import RackMonitor

__all__ = [
    "ConfigurationError",
    "HealthClassifier",
    "HealthIncident",
    "HealthTier",
    "RackMonitor",
    "RackMonitorError",
    "RequestAction",
    "Server",
    "SweepResult",
    "UnknownServerError",
    "Warranty",
    "WarrantyNotFoundError",
    "classify",
    "is_valid_score",
    "validate_thresholds",
]
