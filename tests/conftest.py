"""
Shared pytest fixtures for constellation simulator tests
"""
from unittest.mock import Mock

import numpy as np
import pytest

from config import SimulatorConfig
from constellation.alerts import AlertLog
from constellation.satellite import HISTORY_LENGTH, Satellite
from constellation.state import SimulationState


def make_satellite(sat_id: int = 700, predicted: float = 50.0, **kwargs) -> Satellite:
    """Satellite whose whole signal history (and so its prediction) equals `predicted`"""
    sat = Satellite(id=sat_id, angle=0.0, rssi=predicted, **kwargs)
    sat.signal_history = np.full(HISTORY_LENGTH, predicted)
    return sat


@pytest.fixture
def quiet_rng():
    """
    Mock random source: mid-range orbit radius, clear weather, no random failures.

    integers() always returns 99, which is above every default percent threshold.
    """
    rng = Mock()
    rng.random.return_value = 0.5
    rng.integers.return_value = 99
    return rng


@pytest.fixture
def failing_rng():
    """Mock random source whose every percent roll succeeds"""
    rng = Mock()
    rng.random.return_value = 0.5
    rng.integers.return_value = 0
    return rng


@pytest.fixture
def alert_sink():
    return Mock()


@pytest.fixture
def alert_log(alert_sink):
    return AlertLog(capacity=1000, sink=alert_sink)


@pytest.fixture
def state(alert_log):
    """Simulation state with three healthy satellites and no active link"""
    satellites = [
        make_satellite(700, predicted=40.0),
        make_satellite(701, predicted=60.0),
        make_satellite(702, predicted=50.0),
    ]
    return SimulationState(satellites=satellites, alerts=alert_log, tick=1)


@pytest.fixture
def simulator_config(tmp_path):
    """Small, unpaced, seeded configuration for testing"""
    return SimulatorConfig(
        num_satellites=5,
        duration_ticks=20,
        tick_interval=0,
        seed=42,
        log_path=str(tmp_path / "orbit_latch.log"),
    )
