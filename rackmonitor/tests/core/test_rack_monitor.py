"""Unit tests for the RackMonitor sweep.

Tests verify incident recording, replacement requests and the warranty
failure translation, using in-memory fakes for every collaborator.
"""

import pytest

from rackmonitor.core.exceptions import (
    ConfigurationError,
    RackMonitorError,
    UnknownServerError,
    WarrantyNotFoundError,
)
from rackmonitor.core.models import (
    HealthIncident,
    RequestAction,
    Server,
    Warranty,
)
from rackmonitor.core.rack_monitor import RackMonitor
from rackmonitor.tests.fakes import (
    FakeFulfillmentPort,
    FakeRackPort,
    FakeWarrantyPort,
)

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def server() -> Server:
    return Server("TEST001")


@pytest.fixture
def rack(server: Server) -> FakeRackPort:
    """Rack with a single server in unit 1 and no health reported yet."""
    return FakeRackPort(rack_id="RACK01", units={server: 1})


@pytest.fixture
def warranty(server: Server) -> FakeWarrantyPort:
    port = FakeWarrantyPort()
    port.add_warranty(server, Warranty.null_warranty())
    return port


@pytest.fixture
def fulfillment() -> FakeFulfillmentPort:
    return FakeFulfillmentPort()


@pytest.fixture
def monitor(
    rack: FakeRackPort,
    fulfillment: FakeFulfillmentPort,
    warranty: FakeWarrantyPort,
) -> RackMonitor:
    return RackMonitor(
        racks={rack},
        fulfillment=fulfillment,
        warranty=warranty,
        shaky_threshold=0.9,
        unhealthy_threshold=0.8,
    )


# ============================================================================
# Incident recording
# ============================================================================


class TestIncidents:
    """Incidents recorded for each health tier."""

    def test_unhealthy_server_creates_one_replace_incident(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.5

        monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset(
            {HealthIncident(server, rack, 1, RequestAction.REPLACE)}
        )

    def test_shaky_server_creates_one_inspect_incident(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.85

        monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset(
            {HealthIncident(server, rack, 1, RequestAction.INSPECT)}
        )

    def test_healthy_server_creates_no_incidents(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.91

        monitor.monitor_racks()

        assert len(monitor.get_incidents()) == 0

    def test_score_on_shaky_threshold_is_healthy(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.9

        monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset()

    def test_score_on_unhealthy_threshold_is_shaky(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        rack.health[server] = 0.8

        monitor.monitor_racks()

        (incident,) = monitor.get_incidents()
        assert incident.action is RequestAction.INSPECT
        assert fulfillment.request_count == 0

    def test_incidents_before_first_sweep_are_empty(self, monitor: RackMonitor) -> None:
        assert monitor.get_incidents() == frozenset()
        assert monitor.last_sweep is None

    def test_get_incidents_does_not_sweep(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.5
        monitor.monitor_racks()

        monitor.get_incidents()
        monitor.get_incidents()

        assert rack.get_health_call_count == 1

    def test_incidents_across_multiple_racks(
        self,
        fulfillment: FakeFulfillmentPort,
        warranty: FakeWarrantyPort,
    ) -> None:
        a, b = Server("A001"), Server("B001")
        rack_a = FakeRackPort("RACK-A", units={a: 3}, health={a: 0.85})
        rack_b = FakeRackPort("RACK-B", units={b: 7}, health={b: 0.95})
        monitor = RackMonitor(
            racks=[rack_a, rack_b],
            fulfillment=fulfillment,
            warranty=warranty,
            shaky_threshold=0.9,
            unhealthy_threshold=0.8,
        )

        result = monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset(
            {HealthIncident(a, rack_a, 3, RequestAction.INSPECT)}
        )
        assert result.racks_checked == 2
        assert result.servers_checked == 2
        assert result.inspect_incidents == 1
        assert result.replace_incidents == 0

    def test_server_not_reporting_is_skipped(
        self, monitor: RackMonitor, rack: FakeRackPort
    ) -> None:
        rack.install(Server("TEST002"), 2)

        result = monitor.monitor_racks()

        assert result.servers_checked == 0
        assert monitor.get_incidents() == frozenset()


# ============================================================================
# Remediation
# ============================================================================


class TestRemediation:
    """Replacement requests and warranty lookups."""

    def test_unhealthy_server_is_replaced(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        warranty: FakeWarrantyPort,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        rack.health[server] = 0.63

        monitor.monitor_racks()

        assert warranty.lookup_calls == [server]
        assert fulfillment.replacement_requests == [
            (rack, 1, Warranty.null_warranty())
        ]

    def test_replacement_uses_server_warranty(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        warranty: FakeWarrantyPort,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        server_warranty = Warranty(warranty_id="W-42", provider="acme")
        warranty.add_warranty(server, server_warranty)
        rack.install(server, 4, score=0.1)

        monitor.monitor_racks()

        assert fulfillment.replacement_requests == [(rack, 4, server_warranty)]

    def test_shaky_server_is_not_replaced(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        warranty: FakeWarrantyPort,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        rack.health[server] = 0.85

        monitor.monitor_racks()

        assert fulfillment.request_count == 0
        assert warranty.lookup_calls == []

    def test_healthy_server_touches_no_collaborator(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        warranty: FakeWarrantyPort,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        rack.health[server] = 0.99

        monitor.monitor_racks()

        assert rack.get_unit_calls == []
        assert warranty.lookup_calls == []
        assert fulfillment.request_count == 0

    def test_health_fetched_once_per_rack_per_sweep(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.5

        monitor.monitor_racks()

        assert rack.get_health_call_count == 1


# ============================================================================
# Failure handling
# ============================================================================


class TestFailures:
    """Error translation and sweep abort semantics."""

    def test_unwarrantied_server_raises_rack_monitor_error(
        self,
        rack: FakeRackPort,
        fulfillment: FakeFulfillmentPort,
        server: Server,
    ) -> None:
        monitor = RackMonitor(
            racks=[rack],
            fulfillment=fulfillment,
            warranty=FakeWarrantyPort(),
            shaky_threshold=0.9,
            unhealthy_threshold=0.8,
        )
        rack.health[server] = 0.63

        with pytest.raises(RackMonitorError) as exc_info:
            monitor.monitor_racks()

        assert isinstance(exc_info.value.__cause__, WarrantyNotFoundError)
        assert exc_info.value.server == server
        assert exc_info.value.rack == rack
        assert fulfillment.request_count == 0

    def test_warranty_error_is_not_leaked(
        self, rack: FakeRackPort, fulfillment: FakeFulfillmentPort, server: Server
    ) -> None:
        monitor = RackMonitor(
            racks=[rack],
            fulfillment=fulfillment,
            warranty=FakeWarrantyPort(),
            shaky_threshold=0.9,
            unhealthy_threshold=0.8,
        )
        rack.health[server] = 0.2

        with pytest.raises(RackMonitorError) as exc_info:
            monitor.monitor_racks()

        assert not isinstance(exc_info.value, WarrantyNotFoundError)

    def test_failed_sweep_keeps_incidents_already_applied(
        self, fulfillment: FakeFulfillmentPort
    ) -> None:
        covered, uncovered = Server("COVERED"), Server("UNCOVERED")
        first = FakeRackPort("RACK-1", units={covered: 1}, health={covered: 0.1})
        second = FakeRackPort("RACK-2", units={uncovered: 1}, health={uncovered: 0.1})
        warranty = FakeWarrantyPort()
        warranty.add_warranty(covered)
        monitor = RackMonitor(
            racks=[first, second],
            fulfillment=fulfillment,
            warranty=warranty,
            shaky_threshold=0.9,
            unhealthy_threshold=0.8,
        )

        with pytest.raises(RackMonitorError):
            monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset(
            {HealthIncident(covered, first, 1, RequestAction.REPLACE)}
        )
        assert fulfillment.request_count == 1
        assert monitor.last_sweep is None

    def test_health_fetch_failure_propagates_unchanged(
        self, monitor: RackMonitor, rack: FakeRackPort
    ) -> None:
        rack.set_should_fail(True, "rack controller offline")

        with pytest.raises(RuntimeError, match="rack controller offline"):
            monitor.monitor_racks()

    def test_fulfillment_failure_propagates_unchanged(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        rack.health[server] = 0.3
        fulfillment.set_should_fail(True)

        with pytest.raises(RuntimeError, match="Fulfillment rejected request"):
            monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset()

    def test_unknown_server_fails_fast(
        self, monitor: RackMonitor, rack: FakeRackPort
    ) -> None:
        rack.health[Server("GHOST")] = 0.85

        with pytest.raises(UnknownServerError):
            monitor.monitor_racks()

    @pytest.mark.parametrize(
        "shaky,unhealthy",
        [
            (0.8, 0.9),
            (0.8, 0.8),
            (1.5, 0.8),
            (0.9, -0.1),
        ],
    )
    def test_invalid_thresholds_rejected_at_construction(
        self,
        rack: FakeRackPort,
        fulfillment: FakeFulfillmentPort,
        warranty: FakeWarrantyPort,
        shaky: float,
        unhealthy: float,
    ) -> None:
        with pytest.raises(ConfigurationError):
            RackMonitor(
                racks=[rack],
                fulfillment=fulfillment,
                warranty=warranty,
                shaky_threshold=shaky,
                unhealthy_threshold=unhealthy,
            )


# ============================================================================
# Invalid health scores
# ============================================================================


class TestInvalidScores:
    """Scores that are not finite or fall outside [0, 1]."""

    @pytest.mark.parametrize("score", [float("nan"), float("inf"), 7.5, -0.2])
    def test_invalid_score_is_skipped_and_counted(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        fulfillment: FakeFulfillmentPort,
        score: float,
    ) -> None:
        rack.health[server] = score

        result = monitor.monitor_racks()

        assert result.invalid_scores == 1
        assert monitor.get_incidents() == frozenset()
        assert fulfillment.request_count == 0
        assert rack.get_unit_calls == []

    def test_invalid_score_is_logged(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        rack.health[server] = float("nan")

        monitor.monitor_racks()

        assert "invalid health score nan" in caplog.text

    def test_other_servers_still_remediated(
        self,
        monitor: RackMonitor,
        rack: FakeRackPort,
        server: Server,
        warranty: FakeWarrantyPort,
        fulfillment: FakeFulfillmentPort,
    ) -> None:
        broken = Server("TEST002")
        rack.install(broken, 2, score=float("nan"))
        rack.health[server] = 0.5

        result = monitor.monitor_racks()

        assert result.invalid_scores == 1
        assert result.replace_incidents == 1
        assert fulfillment.replacement_requests == [
            (rack, 1, Warranty.null_warranty())
        ]

    def test_boundary_scores_are_valid(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 1.0

        result = monitor.monitor_racks()

        assert result.invalid_scores == 0


# ============================================================================
# Repeated sweeps
# ============================================================================


class TestRepeatedSweeps:
    """The incident set reflects the latest sweep."""

    def test_repeated_sweeps_are_idempotent(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.5

        monitor.monitor_racks()
        first = monitor.get_incidents()
        monitor.monitor_racks()

        assert monitor.get_incidents() == first
        assert len(monitor.get_incidents()) == 1

    def test_recovered_server_drops_out_of_incidents(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.85
        monitor.monitor_racks()

        rack.health[server] = 0.95
        monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset()

    def test_worsening_server_changes_action(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.85
        monitor.monitor_racks()

        rack.health[server] = 0.4
        monitor.monitor_racks()

        assert monitor.get_incidents() == frozenset(
            {HealthIncident(server, rack, 1, RequestAction.REPLACE)}
        )

    def test_last_sweep_summary_is_updated(
        self, monitor: RackMonitor, rack: FakeRackPort, server: Server
    ) -> None:
        rack.health[server] = 0.5

        result = monitor.monitor_racks()

        assert monitor.last_sweep == result
        assert result.replace_incidents == 1
        assert result.total_incidents == 1

    def test_duplicate_racks_are_swept_once(
        self,
        rack: FakeRackPort,
        server: Server,
        fulfillment: FakeFulfillmentPort,
        warranty: FakeWarrantyPort,
    ) -> None:
        rack.health[server] = 0.5
        monitor = RackMonitor(
            racks=[rack, rack],
            fulfillment=fulfillment,
            warranty=warranty,
            shaky_threshold=0.9,
            unhealthy_threshold=0.8,
        )

        monitor.monitor_racks()

        assert rack.get_health_call_count == 1
        assert fulfillment.request_count == 1
