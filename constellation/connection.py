import logging
from enum import Enum
from typing import Optional

from .alerts import AlertLevel
from .satellite import Satellite
from .selection import select_best
from .state import SimulationState

logger = logging.getLogger(__name__)

HANDOVER_THRESHOLD = 35.0


class LinkState(Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTED = "CONNECTED"


class ConnectionManager:
    """
    Decides which satellite, if any, serves the terminal.

    The terminal holds at most one capacity slot, on `state.active_link`.
    A link is dropped when its satellite is unhealthy or its predicted
    signal falls below the handover threshold; reacquisition happens in
    the same evaluation.
    """

    def __init__(self, state: SimulationState, handover_threshold: float = HANDOVER_THRESHOLD):
        self.state = state
        self.handover_threshold = handover_threshold
        self.stats = {
            "connections": 0,
            "handovers": 0,
            "ticks_connected": 0,
            "ticks_unserved": 0,
        }

    @property
    def link_state(self) -> LinkState:
        if self.state.active_link is None:
            return LinkState.DISCONNECTED
        return LinkState.CONNECTED

    @property
    def active_link(self) -> Optional[Satellite]:
        return self.state.active_link

    def should_hand_over(self, satellite: Satellite) -> bool:
        return not satellite.healthy or satellite.predicted_rssi < self.handover_threshold

    def evaluate(self) -> None:
        """Run one disconnect-then-reconnect cycle"""
        current = self.state.active_link

        if current is not None:
            if self.should_hand_over(current):
                self._disconnect(current)
            else:
                current.uptime += 1

        if self.state.active_link is None:
            candidate = select_best(self.state.satellites)
            if candidate is not None:
                self._connect(candidate)
            else:
                self.stats["ticks_unserved"] += 1
                self.state.alert(AlertLevel.WARNING, "No satellite available")

        if self.state.active_link is not None:
            self.stats["ticks_connected"] += 1

    def _disconnect(self, satellite: Satellite) -> None:
        if satellite.users > 0:
            satellite.users -= 1
        self.state.active_link = None
        self.stats["handovers"] += 1
        self.state.alert(AlertLevel.INFO, "Predictive handover triggered")
        logger.debug(
            f"Handover away from {satellite.id} "
            f"(healthy={satellite.healthy}, predicted={satellite.predicted_rssi:.2f})"
        )

    def _connect(self, satellite: Satellite) -> None:
        satellite.users += 1
        satellite.uptime = 0
        self.state.active_link = satellite
        self.stats["connections"] += 1
        self.state.alert(AlertLevel.INFO, "User connected to satellite")
        logger.debug(f"Connected to {satellite.id} (score={satellite.score:.2f})")
