"""
Tests for random and thermal failure injection
"""
import math

from constellation.alerts import AlertLevel, AlertLog
from constellation.failures import FailureModel
from constellation.simulation import update_satellites
from constellation.state import SimulationState
from conftest import make_satellite


class TestFailureModel:
    """Tests for FailureModel.apply"""

    def test_no_failure_above_probability(self, quiet_rng, state):
        """Test that a roll at or above the threshold leaves the satellite alone"""
        quiet_rng.integers.return_value = 5
        sat = state.satellites[0]

        assert FailureModel(quiet_rng, failure_prob=5).apply(sat, state) is False
        assert sat.healthy is True
        assert len(state.alerts) == 0

    def test_failure_marks_satellite(self, failing_rng, state):
        """Test the effects of a random failure"""
        sat = state.satellites[0]
        sat.users = 4

        assert FailureModel(failing_rng).apply(sat, state) is True

        assert sat.healthy is False
        assert sat.users == 0
        assert sat.fail_count == 1
        assert math.isclose(sat.reliability, 0.9)
        assert [(a.level, a.message) for a in state.alerts] == [
            (AlertLevel.CRITICAL, "Satellite failure occurred"),
        ]

    def test_failure_alert_stamped_with_tick(self, failing_rng, state):
        """Test that the alert carries the current tick"""
        state.tick = 17
        FailureModel(failing_rng).apply(state.satellites[1], state)
        assert state.alerts.entries[0].timestamp == 17

    def test_active_link_lost(self, failing_rng, state):
        """Test that failing the active satellite clears the link and escalates"""
        sat = state.satellites[1]
        sat.users = 1
        state.active_link = sat

        FailureModel(failing_rng).apply(sat, state)

        assert state.active_link is None
        assert state.links_lost == 1
        assert [(a.level, a.message) for a in state.alerts] == [
            (AlertLevel.CRITICAL, "Satellite failure occurred"),
            (AlertLevel.EMERGENCY, "Active satellite lost"),
        ]

    def test_inactive_failure_keeps_link(self, failing_rng, state):
        """Test that failing another satellite leaves the active link alone"""
        state.active_link = state.satellites[1]

        FailureModel(failing_rng).apply(state.satellites[0], state)

        assert state.active_link is state.satellites[1]
        assert state.links_lost == 0
        assert state.alerts.count(AlertLevel.EMERGENCY) == 0

    def test_lost_link_counted_when_alert_log_full(self, failing_rng):
        """Test that a lost link is counted even when its alert is dropped"""
        sat = make_satellite(users=1)
        state = SimulationState(satellites=[sat], alerts=AlertLog(capacity=0), tick=4)
        state.active_link = sat

        FailureModel(failing_rng).apply(sat, state)

        assert state.links_lost == 1
        assert len(state.alerts) == 0
        assert state.alerts.dropped == 2

    def test_zero_probability_never_fails(self, failing_rng, state):
        """Test that failure_prob=0 disables random failures"""
        assert FailureModel(failing_rng, failure_prob=0).apply(state.satellites[0], state) is False


class TestUpdateSatellites:
    """Tests for the per-tick satellite update loop"""

    def test_unhealthy_satellites_skipped(self, quiet_rng, state):
        """Test that failed satellites are frozen"""
        sat = state.satellites[0]
        sat.healthy = False
        sat.angle = 1.0

        update_satellites(state, quiet_rng, FailureModel(quiet_rng))

        assert sat.angle == 1.0
        assert state.satellites[1].angle != 0.0

    def test_thermal_overload_alert(self, quiet_rng, alert_log):
        """Test that driving a satellite to 81C raises one CRITICAL alert at this tick"""
        sat = make_satellite(temperature=80.5, users=2)
        sat.angle = math.pi / 2 - 0.05
        state = SimulationState(satellites=[sat], alerts=alert_log, tick=9)

        update_satellites(state, quiet_rng, FailureModel(quiet_rng))

        assert sat.healthy is False
        assert sat.users == 0
        assert [(a.level, a.message, a.timestamp) for a in state.alerts] == [
            (AlertLevel.CRITICAL, "Thermal overload detected", 9),
        ]

    def test_thermal_and_random_failure_same_tick(self, failing_rng, alert_log):
        """Test that a thermally failed satellite still rolls for random failure"""
        failing_rng.integers.return_value = 0
        sat = make_satellite(temperature=80.0)
        state = SimulationState(satellites=[sat], alerts=alert_log, tick=3)

        update_satellites(state, failing_rng, FailureModel(failing_rng))

        assert sat.fail_count == 1
        assert [a.message for a in state.alerts] == [
            "Thermal overload detected",
            "Satellite failure occurred",
        ]

    def test_satellites_updated_in_index_order(self, failing_rng, alert_log):
        """Test that failures are reported in ascending satellite order"""
        satellites = [make_satellite(700 + i) for i in range(3)]
        state = SimulationState(satellites=satellites, alerts=alert_log, tick=1)
        order = []
        model = FailureModel(failing_rng)
        original = model.apply

        def record(sat, st):
            order.append(sat.id)
            return original(sat, st)

        model.apply = record
        update_satellites(state, failing_rng, model)

        assert order == [700, 701, 702]
