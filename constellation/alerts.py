"""
Alert log for the ORBIT-LATCH constellation simulator

Bounded, append-only record of domain events. Every recorded alert is also
mirrored as one text line to a persistent sink on a best-effort basis.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000
MAX_MESSAGE_LENGTH = 139


class AlertLevel(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    EMERGENCY = "EMERGENCY"


@dataclass(frozen=True)
class Alert:
    """
    A single alert raised during the simulation.

    Attributes:
        level: Severity of the event
        message: Human-readable description
        timestamp: Simulation tick at which the alert was raised
    """
    level: AlertLevel
    message: str
    timestamp: int

    def format_line(self) -> str:
        """Render the alert as a log line, e.g. ``[0012s] INFO       User connected``"""
        return f"[{self.timestamp:04d}s] {self.level.value:<10} {self.message}"


class AlertSink(Protocol):
    def write(self, line: str) -> None:
        ...


class FileAlertSink:
    """Appends one line per alert to a text file"""

    def __init__(self, path: str):
        self.path = Path(path)

    def write(self, line: str) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")


class AlertLog:
    """
    Fixed-capacity alert store.

    Once full, new alerts are discarded (never overwriting old ones) without
    signalling the caller.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, sink: Optional[AlertSink] = None):
        self.capacity = capacity
        self.sink = sink
        self.dropped = 0
        self._entries: list[Alert] = []

    def raise_alert(self, level: AlertLevel, message: str, tick: int) -> Optional[Alert]:
        """
        Record an alert and mirror it to the sink.

        Args:
            level: Alert severity
            message: Description, truncated to MAX_MESSAGE_LENGTH characters
            tick: Current simulation tick

        Returns:
            The recorded Alert, or None if the log is at capacity
        """
        if self.full:
            self.dropped += 1
            return None

        alert = Alert(AlertLevel(level), message[:MAX_MESSAGE_LENGTH], tick)
        self._entries.append(alert)
        logger.debug(alert.format_line())

        if self.sink is not None:
            try:
                self.sink.write(alert.format_line())
            except OSError as e:
                # Persistence is best-effort; the in-memory entry stays
                logger.debug(f"Alert sink write failed: {e}")

        return alert

    @property
    def full(self) -> bool:
        return len(self._entries) >= self.capacity

    @property
    def entries(self) -> tuple[Alert, ...]:
        return tuple(self._entries)

    def count(self, level: AlertLevel) -> int:
        return sum(1 for alert in self._entries if alert.level == level)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Alert]:
        return iter(self._entries)
