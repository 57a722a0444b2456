import logging

import numpy as np

from .alerts import AlertLevel
from .satellite import Satellite
from .state import SimulationState

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_PROB = 5  # percent


class FailureModel:
    """
    Random per-tick satellite failures.

    Each roll is independent; a failure is permanent for the rest of the run
    and costs the satellite reliability.
    """

    def __init__(self, rng: np.random.Generator, failure_prob: int = DEFAULT_FAILURE_PROB):
        self.rng = rng
        self.failure_prob = failure_prob

    def apply(self, satellite: Satellite, state: SimulationState) -> bool:
        """Roll for a random failure on one satellite; returns True if it failed"""
        if self.rng.integers(100) >= self.failure_prob:
            return False

        satellite.take_offline()
        satellite.fail_count += 1
        satellite.degrade_reliability()
        state.alert(AlertLevel.CRITICAL, "Satellite failure occurred")
        logger.debug(f"Satellite {satellite.id} failed (total failures: {satellite.fail_count})")

        if state.active_link is satellite:
            state.active_link = None
            state.links_lost += 1
            state.alert(AlertLevel.EMERGENCY, "Active satellite lost")

        return True
