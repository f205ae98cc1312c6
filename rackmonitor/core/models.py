"""Domain models for the rack health monitor.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import RackPort


@dataclass(frozen=True)
class Server:
    """A physical server, identified by its asset id."""

    server_id: str

    def __post_init__(self) -> None:
        """Validate server invariants on creation."""
        if not self.server_id or not self.server_id.strip():
            raise ValueError("server_id must be a non-empty string")

    def __str__(self) -> str:
        return self.server_id


class HealthTier(Enum):
    """Classification of a health score.

    Derived from a score and two thresholds; never stored on its own.
    """

    HEALTHY = "healthy"
    SHAKY = "shaky"
    UNHEALTHY = "unhealthy"


class RequestAction(Enum):
    """Remediation requested for a non-healthy server."""

    INSPECT = "inspect"
    REPLACE = "replace"


@dataclass(frozen=True)
class Warranty:
    """Entitlement data consulted before requesting a replacement.

    A server without entitlement still has a Warranty: the null warranty
    returned by null_warranty(). A missing record is a different condition,
    signalled by WarrantyNotFoundError from the warranty adapter.
    """

    warranty_id: str
    provider: str | None = None
    expires_on: date | None = None

    @classmethod
    def null_warranty(cls) -> "Warranty":
        """Return the sentinel "no warranty" value."""
        return cls(warranty_id="")

    @property
    def is_null(self) -> bool:
        return not self.warranty_id


@dataclass(frozen=True)
class HealthIncident:
    """A recorded need for remediation.

    Two incidents are equal when server, rack, unit and action all match,
    which is what keeps the monitor's incident set free of duplicates.
    """

    server: Server
    rack: "RackPort"
    unit: int
    action: RequestAction

    def __post_init__(self) -> None:
        """Validate incident invariants on creation."""
        if self.unit < 1:
            raise ValueError(f"unit must be a positive integer, got {self.unit}")


@dataclass(frozen=True)
class SweepResult:
    """Summary of a single monitoring sweep."""

    racks_checked: int
    servers_checked: int
    inspect_incidents: int
    replace_incidents: int
    timestamp: datetime
    invalid_scores: int = 0

    @property
    def total_incidents(self) -> int:
        return self.inspect_incidents + self.replace_incidents
