from dataclasses import dataclass
from typing import Optional


@dataclass
class SimulatorConfig:
    """Configuration for the constellation simulator"""

    num_satellites: int = 20
    max_users: int = 200
    max_alerts: int = 1000
    duration_ticks: int = 180
    tick_interval: float = 1.0
    failure_prob: int = 5           # percent per satellite per tick
    weather_degrade_prob: int = 20  # percent per tick
    handover_threshold: float = 35.0
    log_path: str = "orbit_latch.log"
    seed: Optional[int] = None
    api_url: Optional[str] = None
    json_output: bool = False

    # Runtime state
    running: bool = True

    def __post_init__(self):
        if self.num_satellites <= 0:
            raise ValueError(f"num_satellites must be positive, got {self.num_satellites}")
        if self.max_users <= 0:
            raise ValueError(f"max_users must be positive, got {self.max_users}")
        if self.max_alerts < 0:
            raise ValueError(f"max_alerts cannot be negative, got {self.max_alerts}")
        if self.duration_ticks < 0:
            raise ValueError(f"duration_ticks cannot be negative, got {self.duration_ticks}")
        if self.tick_interval < 0:
            raise ValueError(f"tick_interval cannot be negative, got {self.tick_interval}")
        if self.handover_threshold < 0:
            raise ValueError(f"handover_threshold cannot be negative, got {self.handover_threshold}")
        for name in ("failure_prob", "weather_degrade_prob"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be a percentage in [0, 100], got {value}")
