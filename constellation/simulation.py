import asyncio
import logging
from typing import Iterable, Optional

import numpy as np

from config import SimulatorConfig
from .alerts import AlertLevel, AlertLog, AlertSink
from .connection import ConnectionManager
from .failures import FailureModel
from .physics import weather_tick
from .satellite import Satellite
from .state import SimulationState
from .telemetry import Snapshot, TelemetrySink

logger = logging.getLogger(__name__)


def build_state(config: SimulatorConfig, rng: np.random.Generator,
                alert_sink: Optional[AlertSink] = None) -> SimulationState:
    """Launch the constellation and an empty alert log"""
    satellites = [
        Satellite.launch(i, rng, max_users=config.max_users)
        for i in range(config.num_satellites)
    ]
    return SimulationState(
        satellites=satellites,
        alerts=AlertLog(capacity=config.max_alerts, sink=alert_sink),
    )


def update_satellites(state: SimulationState, rng: np.random.Generator,
                      failures: FailureModel) -> None:
    """Physical, thermal and failure update for every healthy satellite, in index order"""
    for sat in state.satellites:
        if not sat.healthy:
            continue

        if sat.advance(state.weather_factor, rng):
            state.alert(AlertLevel.CRITICAL, "Thermal overload detected")

        # Rolls even when the thermal check above has just failed the satellite
        failures.apply(sat, state)


class TickDriver:
    """
    Advances the simulation one tick at a time.

    Phase order within a tick is fixed: weather, satellites, connection
    manager, snapshot.
    """

    def __init__(self, config: SimulatorConfig,
                 rng: Optional[np.random.Generator] = None,
                 alert_sink: Optional[AlertSink] = None):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.state = build_state(config, self.rng, alert_sink)
        self.failures = FailureModel(self.rng, config.failure_prob)
        self.connection = ConnectionManager(self.state, config.handover_threshold)
        # rssi of the active link after every tick it was connected
        self.link_rssi: list[float] = []

    @property
    def finished(self) -> bool:
        return self.state.tick >= self.config.duration_ticks

    def step(self) -> Snapshot:
        """Run one full tick and return its snapshot"""
        state = self.state
        state.tick += 1

        state.weather_factor = weather_tick(self.rng, self.config.weather_degrade_prob)
        update_satellites(state, self.rng, self.failures)
        self.connection.evaluate()

        if state.active_link is not None:
            self.link_rssi.append(float(state.active_link.rssi))

        return Snapshot.capture(state)

    async def run(self, sinks: Iterable[TelemetrySink] = ()) -> None:
        """Step until the tick budget is spent, pacing ticks by `tick_interval`"""
        sinks = list(sinks)
        logger.info(
            f"Starting constellation of {len(self.state.satellites)} satellites "
            f"for {self.config.duration_ticks} ticks"
        )

        while self.config.running and not self.finished:
            snapshot = self.step()
            for sink in sinks:
                await sink.emit(snapshot)

            if self.config.tick_interval > 0:
                await asyncio.sleep(self.config.tick_interval)

    def summary(self) -> dict:
        """Run statistics for the final report"""
        state = self.state
        ticks = state.tick
        stats = dict(self.connection.stats)
        stats.update({
            "ticks": ticks,
            "availability": (stats["ticks_connected"] / ticks * 100 if ticks > 0 else 0.0),
            "links_lost": state.links_lost,
            "failed_satellites": len(state.satellites) - state.healthy_count,
            "alerts_recorded": len(state.alerts),
            "alerts_dropped": state.alerts.dropped,
        })

        if self.link_rssi:
            samples = np.asarray(self.link_rssi)
            stats["link_rssi_mean"] = float(np.mean(samples))
            stats["link_rssi_min"] = float(np.min(samples))
        else:
            stats["link_rssi_mean"] = 0.0
            stats["link_rssi_min"] = 0.0

        return stats
