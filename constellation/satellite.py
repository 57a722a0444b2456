import math
from dataclasses import dataclass, field

import numpy as np

from . import physics

HISTORY_LENGTH = 5
ORBIT_STEP_RAD = 0.05
HEAT_PER_RSSI = 0.005       # degrees C gained per unit of received signal
THERMAL_LIMIT_C = 80.0
RELIABILITY_FLOOR = 0.1
RELIABILITY_PENALTY = 0.1
SATELLITE_ID_BASE = 700
DEFAULT_MAX_USERS = 200

TWO_PI = 2 * math.pi


@dataclass(eq=False)
class Satellite:
    """
    Mutable per-slot satellite record, updated once per tick.

    Unhealthy satellites are frozen: they are skipped by the per-tick update
    and by selection for the rest of the run.
    """
    id: int
    angle: float
    max_users: int = DEFAULT_MAX_USERS
    distance: float = 0.0
    rssi: float = 0.0
    snr: float = 0.0
    temperature: float = 25.0
    reliability: float = 1.0
    score: float = 0.0
    users: int = 0
    uptime: int = 0
    fail_count: int = 0
    healthy: bool = True
    signal_history: np.ndarray = field(default_factory=lambda: np.zeros(HISTORY_LENGTH))

    @classmethod
    def launch(cls, index: int, rng: np.random.Generator,
               max_users: int = DEFAULT_MAX_USERS) -> "Satellite":
        """Create the satellite for constellation slot `index` at a random orbital position"""
        sat = cls(
            id=SATELLITE_ID_BASE + index,
            angle=rng.random() * TWO_PI,
            max_users=max_users,
            temperature=25.0 + int(rng.integers(10)),
        )
        sat.distance = physics.distance(sat.angle, rng)
        sat.rssi = physics.rssi(sat.distance, physics.CLEAR_WEATHER)
        sat.signal_history = np.full(HISTORY_LENGTH, sat.rssi)
        sat.score = sat.rssi
        return sat

    @property
    def predicted_rssi(self) -> float:
        return physics.predicted_rssi(self.signal_history)

    @property
    def load(self) -> float:
        """Fraction of user capacity in use"""
        return self.users / self.max_users

    @property
    def load_percent(self) -> int:
        return (self.users * 100) // self.max_users

    @property
    def has_capacity(self) -> bool:
        return self.users < self.max_users

    def record_signal(self, value: float) -> None:
        # Shift left, newest sample goes last
        self.signal_history[:-1] = self.signal_history[1:]
        self.signal_history[-1] = value

    def advance(self, weather_factor: float, rng: np.random.Generator) -> bool:
        """
        Move the satellite one orbital step and refresh its link metrics.

        Returns:
            True if this step pushed the satellite into thermal overload
        """
        self.angle = (self.angle + ORBIT_STEP_RAD) % TWO_PI

        self.distance = physics.distance(self.angle, rng)
        self.rssi = physics.rssi(self.distance, weather_factor)
        self.snr = self.rssi / 3.0
        self.record_signal(self.rssi)

        self.temperature += self.rssi * HEAT_PER_RSSI
        if self.temperature > THERMAL_LIMIT_C:
            self.take_offline()
            return True
        return False

    def take_offline(self) -> None:
        self.healthy = False
        self.users = 0

    def degrade_reliability(self) -> None:
        self.reliability = max(RELIABILITY_FLOOR, self.reliability - RELIABILITY_PENALTY)
