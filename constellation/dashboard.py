"""
Human-readable terminal dashboard for the ORBIT-LATCH simulator
"""

from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .alerts import Alert, AlertLevel
from .telemetry import SatelliteRecord, Snapshot

TITLE = "ORBIT-LATCH v4.0 :: SATELLITE HANDOVER SIMULATION"
RECENT_ALERTS = 12

LEVEL_COLORS = {
    AlertLevel.INFO: "green",
    AlertLevel.WARNING: "yellow",
    AlertLevel.CRITICAL: "red",
    AlertLevel.EMERGENCY: "bold red",
}


def format_clock(tick: int) -> str:
    """Ticks are seconds; render as mm:ss"""
    return f"{tick // 60:02d}:{tick % 60:02d}"


def satellite_state(record: SatelliteRecord, active_id: int) -> str:
    if not record.healthy:
        return "FAILED"
    if record.id == active_id:
        return "CONNECTED"
    return "ONLINE"


def make_satellite_table(snapshot: Snapshot) -> Table:
    tbl = Table(expand=True)
    for name in ("ID", "STATE", "DIST(km)", "RSSI", "LOAD", "SNR", "TEMP", "REL", "UP", "FAIL", "SCORE"):
        tbl.add_column(name, justify="left" if name in ("ID", "STATE") else "right")

    for record in snapshot.satellites:
        state = satellite_state(record, snapshot.active_satellite)
        style = "bold white" if state == "CONNECTED" else "dim" if state == "FAILED" else None
        tbl.add_row(
            str(record.id),
            state,
            f"{record.distance:.1f}",
            f"{record.rssi:.1f}",
            f"{record.load}%",
            f"{record.snr:.1f}",
            f"{record.temperature:.1f}",
            f"{record.reliability:.2f}",
            str(record.uptime),
            str(record.fail_count),
            f"{record.score:.1f}",
            style=style,
        )
    return tbl


def make_alerts_panel(alerts: tuple[Alert, ...]) -> Panel:
    lines = Text()
    for alert in alerts[-RECENT_ALERTS:]:
        color = LEVEL_COLORS[alert.level]
        lines.append(f"[{alert.timestamp:04d}s] ")
        lines.append(f"{alert.level.value:<10}", style=color)
        lines.append(f" {alert.message}\n")
    if not alerts:
        lines.append("NO ACTIVE ALERTS")
    return Panel(lines, title="ALERT HISTORY")


def render(snapshot: Snapshot) -> Group:
    header = Text(
        f"{TITLE}\nTIME {format_clock(snapshot.tick)} | SPACE WEATHER {snapshot.weather:.1f}x",
        style="bold",
    )
    return Group(header, make_satellite_table(snapshot), make_alerts_panel(snapshot.alerts))


class ConsoleDashboard:
    """Telemetry sink that redraws a rich Live display each tick"""

    def __init__(self, live: Live):
        self.live = live

    async def emit(self, snapshot: Snapshot) -> None:
        self.live.update(render(snapshot))
