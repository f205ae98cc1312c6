"""Exception types raised by the rack health monitor core."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Server
    from .ports import RackPort


class RackMonitorError(Exception):
    """Raised when a monitoring sweep cannot complete.

    This is the only error type callers of RackMonitor need to handle;
    collaborator-specific errors are chained as the cause.
    """

    def __init__(
        self,
        message: str,
        server: "Server | None" = None,
        rack: "RackPort | None" = None,
    ):
        super().__init__(message)
        self.server = server
        self.rack = rack


class ConfigurationError(RackMonitorError, ValueError):
    """Invalid thresholds or inventory, detected at construction time."""


class WarrantyNotFoundError(LookupError):
    """The warranty service holds no record for a server."""

    def __init__(self, server: "Server"):
        super().__init__(f"No warranty record for server {server}")
        self.server = server


class UnknownServerError(LookupError):
    """A rack was asked about a server it does not hold."""

    def __init__(self, server: "Server", rack_id: str):
        super().__init__(f"Server {server} is not installed in rack {rack_id}")
        self.server = server
        self.rack_id = rack_id
