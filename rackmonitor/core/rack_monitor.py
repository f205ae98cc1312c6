"""Monitoring sweep logic for the rack health monitor.

This module implements the sweep that classifies every server in the
configured racks, records incidents for non-healthy servers and
requests replacements for unhealthy ones.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from .classifier import HealthClassifier, is_valid_score
from .exceptions import RackMonitorError, WarrantyNotFoundError
from .models import (
    HealthIncident,
    HealthTier,
    RequestAction,
    Server,
    SweepResult,
)
from .ports import FulfillmentPort, MonitorPort, RackPort, WarrantyPort

logger = logging.getLogger(__name__)


class RackMonitor(MonitorPort):
    """Implements the monitoring sweep.

    This service orchestrates:
    - Fetching health scores from each rack (one call per rack per sweep)
    - Classifying each server into a health tier
    - Recording INSPECT incidents for shaky servers
    - Looking up warranties and requesting replacements for unhealthy servers

    The incident set reflects the most recent sweep only, so repeated
    sweeps over unchanged health data yield an equal set.
    """

    def __init__(
        self,
        racks: Iterable[RackPort],
        fulfillment: FulfillmentPort,
        warranty: WarrantyPort,
        shaky_threshold: float,
        unhealthy_threshold: float,
    ):
        """Initialize the monitor.

        Args:
            racks: Racks to monitor. Racks sharing a rack_id are merged.
            fulfillment: Client used to request replacements.
            warranty: Client used to look up server warranties.
            shaky_threshold: Scores below this are at least SHAKY.
            unhealthy_threshold: Scores below this are UNHEALTHY.

        Raises:
            ConfigurationError: If the thresholds are invalid.
        """
        self.classifier = HealthClassifier(unhealthy_threshold, shaky_threshold)
        self.racks: tuple[RackPort, ...] = tuple(dict.fromkeys(racks))
        self.fulfillment = fulfillment
        self.warranty = warranty
        self._incidents: frozenset[HealthIncident] = frozenset()
        self.last_sweep: SweepResult | None = None

    def monitor_racks(self) -> SweepResult:
        """Run one sweep over every configured rack.

        A failure aborts the sweep. Incidents derived before the failure
        (including replacements already requested) become the current
        incident set before the error propagates.
        Scores that are not finite or fall outside [0, 1] are logged and
        the server is skipped.

        Raises:
            RackMonitorError: If the warranty lookup for an unhealthy
                server finds no record.
        """
        now = datetime.now(timezone.utc)
        incidents: set[HealthIncident] = set()
        servers_checked = 0
        invalid_scores = 0

        try:
            for rack in self.racks:
                health = rack.get_health()
                logger.debug(
                    f"Rack {rack.rack_id} reported health for {len(health)} servers"
                )
                for server, score in health.items():
                    servers_checked += 1
                    if not is_valid_score(score):
                        invalid_scores += 1
                        logger.error(
                            f"Server {server} in rack {rack.rack_id} reported "
                            f"invalid health score {score!r}, skipping"
                        )
                        continue
                    incident = self._check_server(rack, server, score)
                    if incident is not None:
                        incidents.add(incident)
        finally:
            self._incidents = frozenset(incidents)

        result = SweepResult(
            racks_checked=len(self.racks),
            servers_checked=servers_checked,
            inspect_incidents=sum(
                1 for i in incidents if i.action is RequestAction.INSPECT
            ),
            replace_incidents=sum(
                1 for i in incidents if i.action is RequestAction.REPLACE
            ),
            timestamp=now,
            invalid_scores=invalid_scores,
        )
        self.last_sweep = result

        logger.info(
            f"Sweep completed: {result.racks_checked} racks, "
            f"{result.servers_checked} servers, "
            f"{result.inspect_incidents} to inspect, "
            f"{result.replace_incidents} replacements requested"
        )
        if result.invalid_scores:
            logger.warning(
                f"Sweep skipped {result.invalid_scores} servers with invalid health scores"
            )
        return result

    def get_incidents(self) -> frozenset[HealthIncident]:
        return self._incidents

    def _check_server(
        self, rack: RackPort, server: Server, score: float
    ) -> HealthIncident | None:
        """Classify one server and apply the matching remediation."""
        tier = self.classifier.classify(score)
        logger.debug(f"Server {server} in rack {rack.rack_id}: {score:.3f} -> {tier.value}")

        if tier is HealthTier.HEALTHY:
            return None

        unit = rack.get_unit_for_server(server)

        if tier is HealthTier.SHAKY:
            return HealthIncident(server, rack, unit, RequestAction.INSPECT)

        try:
            warranty = self.warranty.get_warranty_for_server(server)
        except WarrantyNotFoundError as e:
            logger.error(
                f"Cannot replace server {server} in rack {rack.rack_id} "
                f"unit {unit}: {e}"
            )
            raise RackMonitorError(
                f"Warranty lookup failed for unhealthy server {server} "
                f"in rack {rack.rack_id}",
                server=server,
                rack=rack,
            ) from e

        self.fulfillment.request_replacement(rack, unit, warranty)
        logger.info(
            f"Requested replacement of server {server} "
            f"(rack {rack.rack_id}, unit {unit})"
        )
        return HealthIncident(server, rack, unit, RequestAction.REPLACE)
