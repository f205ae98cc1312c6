"""In-memory rack adapter.

Implements RackPort over a fixed server-to-unit mapping. Health scores
come either from a static mapping or from a zero-argument callable that
is invoked on every get_health() call.
"""

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType

from rackmonitor.core.exceptions import ConfigurationError, UnknownServerError
from rackmonitor.core.models import Server
from rackmonitor.core.ports import RackPort

logger = logging.getLogger(__name__)

HealthSource = Callable[[], Mapping[Server, float]]


class StaticRack(RackPort):
    """Rack with a fixed set of installed servers."""

    def __init__(
        self,
        rack_id: str,
        server_units: Mapping[Server, int],
        health: Mapping[Server, float] | HealthSource | None = None,
    ):
        """Initialize the rack.

        Args:
            rack_id: Unique identifier of the rack.
            server_units: Unit slot of every installed server.
            health: Current scores, or a callable returning them.
                Defaults to no server reporting.

        Raises:
            ConfigurationError: If rack_id is blank or unit slots are not
                positive and unique.
        """
        if not rack_id or not rack_id.strip():
            raise ConfigurationError("rack_id must be a non-empty string")

        seen: dict[int, Server] = {}
        for server, unit in server_units.items():
            if unit < 1:
                raise ConfigurationError(
                    f"Rack {rack_id}: unit for {server} must be positive, got {unit}"
                )
            if unit in seen:
                raise ConfigurationError(
                    f"Rack {rack_id}: unit {unit} assigned to both "
                    f"{seen[unit]} and {server}"
                )
            seen[unit] = server

        self._rack_id = rack_id
        self._server_units = MappingProxyType(dict(server_units))
        self._health = health

    @property
    def rack_id(self) -> str:
        return self._rack_id

    @property
    def server_units(self) -> Mapping[Server, int]:
        return self._server_units

    def get_health(self) -> Mapping[Server, float]:
        if self._health is None:
            return {}
        scores = self._health() if callable(self._health) else self._health

        unknown = [s for s in scores if s not in self._server_units]
        if unknown:
            logger.warning(
                f"Rack {self._rack_id}: ignoring health for servers not installed: "
                f"{', '.join(sorted(str(s) for s in unknown))}"
            )
        return {s: score for s, score in scores.items() if s in self._server_units}

    def get_unit_for_server(self, server: Server) -> int:
        try:
            return self._server_units[server]
        except KeyError:
            raise UnknownServerError(server, self._rack_id) from None
