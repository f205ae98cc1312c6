"""Port interfaces for the rack health monitor.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package; in-memory fakes for tests live in tests/fakes/.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - RackPort: Server placement and current health scores
   - WarrantyPort: Warranty lookup per server
   - FulfillmentPort: Physical replacement requests

2. **Driving Ports** (adapters/external systems call into core)
   - MonitorPort: Entry point for monitoring sweeps and incident queries
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from .models import HealthIncident, Server, SweepResult, Warranty


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class RackPort(ABC):
    """Port for a rack of servers.

    A rack is the authority on where a server physically sits and how
    healthy it is right now. Racks compare equal by rack_id so that
    incidents referring to the same rack deduplicate regardless of which
    adapter instance produced them.
    """

    @property
    @abstractmethod
    def rack_id(self) -> str:
        """Unique identifier of the rack."""

    @abstractmethod
    def get_health(self) -> Mapping[Server, float]:
        """Return the current health score of every reporting server.

        Returns:
            Mapping of Server to a score in [0, 1]; lower is worse.
            Servers that are not currently reporting may be omitted.

        Raises:
            Exception: If the health source is unavailable.
        """

    @abstractmethod
    def get_unit_for_server(self, server: Server) -> int:
        """Return the unit slot occupied by a server.

        Args:
            server: A server installed in this rack.

        Returns:
            Positive unit number.

        Raises:
            UnknownServerError: If the server is not installed in this rack.
        """

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RackPort):
            return NotImplemented
        return self.rack_id == other.rack_id

    def __hash__(self) -> int:
        return hash(self.rack_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rack_id={self.rack_id!r})"


class WarrantyPort(ABC):
    """Port for looking up server warranties.

    Adapters implementing this port wrap the warranty service. Transport
    concerns (timeouts, retries) belong to the adapter.
    """

    @abstractmethod
    def get_warranty_for_server(self, server: Server) -> Warranty:
        """Retrieve the warranty for a server.

        Args:
            server: The server to look up.

        Returns:
            The server's Warranty, or Warranty.null_warranty() if the
            record exists but carries no entitlement.

        Raises:
            WarrantyNotFoundError: If no warranty record exists.
        """


class FulfillmentPort(ABC):
    """Port for requesting physical remediation of servers."""

    @abstractmethod
    def request_replacement(
        self, rack: RackPort, unit: int, warranty: Warranty
    ) -> None:
        """Request replacement of the server in a rack unit.

        Fire-and-forget: the call returns once the request is accepted.

        Args:
            rack: Rack holding the server.
            unit: Unit slot of the server.
            warranty: Warranty to bill the replacement against.

        Raises:
            Exception: If the fulfillment service rejects the request.
                The monitor does not handle it.
        """


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class MonitorPort(ABC):
    """Port for running monitoring sweeps.

    Driving port: the daemon scheduler or composition root invokes these
    methods. The implementation lives in the core (rack_monitor.py).
    """

    @abstractmethod
    def monitor_racks(self) -> SweepResult:
        """Execute one classify -> record -> remediate sweep over all racks.

        Raises:
            RackMonitorError: If a warranty lookup fails for an unhealthy
                server. Other collaborator failures propagate unchanged.
        """

    @abstractmethod
    def get_incidents(self) -> frozenset[HealthIncident]:
        """Return the incidents recorded by the most recent sweep.

        Does not trigger a sweep.
        """
