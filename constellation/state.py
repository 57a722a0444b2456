from dataclasses import dataclass, field
from typing import Optional

from .alerts import Alert, AlertLevel, AlertLog
from .physics import CLEAR_WEATHER
from .satellite import Satellite


@dataclass
class SimulationState:
    """All mutable state of one simulation run"""

    satellites: list[Satellite]
    alerts: AlertLog = field(default_factory=AlertLog)
    tick: int = 0
    weather_factor: float = CLEAR_WEATHER
    active_link: Optional[Satellite] = None
    # Active links lost to satellite failure; counted independently of the capped alert log
    links_lost: int = 0

    def alert(self, level: AlertLevel, message: str) -> Optional[Alert]:
        """Raise an alert stamped with the current tick"""
        return self.alerts.raise_alert(level, message, self.tick)

    @property
    def healthy_count(self) -> int:
        return sum(1 for sat in self.satellites if sat.healthy)
