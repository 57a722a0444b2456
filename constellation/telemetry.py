"""
Telemetry snapshots and sinks for the ORBIT-LATCH simulator

A Snapshot is an immutable copy of the simulation state taken after the
connection manager has run for a tick. Sinks consume one snapshot per tick.
"""

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Protocol, TextIO

import aiohttp

from .alerts import Alert
from .satellite import Satellite
from .state import SimulationState

logger = logging.getLogger(__name__)

NO_ACTIVE_SATELLITE = -1


@dataclass(frozen=True)
class SatelliteRecord:
    """Per-satellite slice of a snapshot"""
    id: int
    healthy: bool
    distance: float
    rssi: float
    load: int
    snr: float
    temperature: float
    reliability: float
    uptime: int
    fail_count: int
    score: float

    @classmethod
    def from_satellite(cls, sat: Satellite) -> "SatelliteRecord":
        return cls(
            id=sat.id,
            healthy=sat.healthy,
            distance=float(sat.distance),
            rssi=float(sat.rssi),
            load=sat.load_percent,
            snr=float(sat.snr),
            temperature=float(sat.temperature),
            reliability=float(sat.reliability),
            uptime=sat.uptime,
            fail_count=sat.fail_count,
            score=float(sat.score),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "health": int(self.healthy),
            "dist": round(self.distance, 2),
            "rssi": round(self.rssi, 2),
            "load": self.load,
            "snr": round(self.snr, 2),
            "temp": round(self.temperature, 2),
            "rel": round(self.reliability, 2),
            "up": self.uptime,
            "fail": self.fail_count,
            "score": round(self.score, 2),
        }


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of one tick"""
    tick: int
    weather: float
    active_satellite: int
    satellites: tuple[SatelliteRecord, ...]
    alerts: tuple[Alert, ...]

    @classmethod
    def capture(cls, state: SimulationState) -> "Snapshot":
        active = state.active_link
        return cls(
            tick=state.tick,
            weather=float(state.weather_factor),
            active_satellite=active.id if active is not None else NO_ACTIVE_SATELLITE,
            satellites=tuple(SatelliteRecord.from_satellite(sat) for sat in state.satellites),
            alerts=state.alerts.entries,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.tick,
            "weather": round(self.weather, 2),
            "active_sat": self.active_satellite,
            "sats": [record.to_dict() for record in self.satellites],
            "alerts": [
                {"time": alert.timestamp, "level": alert.level.value, "msg": alert.message}
                for alert in self.alerts
            ],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


class TelemetrySink(Protocol):
    async def emit(self, snapshot: Snapshot) -> None:
        ...


class JsonLineSink:
    """Streams one JSON document per line, flushed after every tick"""

    def __init__(self, stream: TextIO = sys.stdout):
        self.stream = stream

    async def emit(self, snapshot: Snapshot) -> None:
        self.stream.write(snapshot.to_json() + "\n")
        self.stream.flush()


class HttpTelemetrySink:
    """POSTs each snapshot to an ingestion service"""

    def __init__(self, session: aiohttp.ClientSession, api_url: str):
        self.session = session
        self.api_url = api_url.rstrip("/")
        self.stats = {
            "total_sent": 0,
            "success": 0,
            "errors": 0,
        }

    async def send(self, snapshot: Snapshot) -> dict:
        """Send a single snapshot"""
        try:
            async with self.session.post(
                f"{self.api_url}/telemetry",
                json=snapshot.to_dict(),
                timeout=aiohttp.ClientTimeout(total=5)
            ) as response:
                if response.status == 202:
                    return {"status": "success", "tick": snapshot.tick}
                else:
                    return {"status": "error", "code": response.status}
        except Exception as e:
            return {"status": "error", "message": str(e)}

    async def emit(self, snapshot: Snapshot) -> None:
        result = await self.send(snapshot)

        self.stats["total_sent"] += 1
        if result["status"] == "success":
            self.stats["success"] += 1
        else:
            self.stats["errors"] += 1
            logger.debug(f"Telemetry delivery failed at tick {snapshot.tick}: {result}")
