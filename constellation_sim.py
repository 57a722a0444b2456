#!/usr/bin/env python3
"""
ORBIT-LATCH Constellation Simulator
Simulates a LEO constellation serving one ground terminal with predictive handover
"""

import argparse
import asyncio
import logging
import sys
from contextlib import AsyncExitStack
from typing import Optional

import aiohttp
from rich.console import Console
from rich.live import Live

from config import SimulatorConfig
from constellation.alerts import FileAlertSink
from constellation.dashboard import ConsoleDashboard
from constellation.simulation import TickDriver
from constellation.telemetry import HttpTelemetrySink, JsonLineSink

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

BANNER = "Starting ORBIT-LATCH v4.0 Simulation..."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ORBIT-LATCH LEO Constellation Handover Simulator"
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["json", "table"],
        default="table",
        help="'json' streams one telemetry snapshot per line (default: table)"
    )
    parser.add_argument(
        "--satellites", "-s",
        type=int,
        default=20,
        help="Number of satellites in the constellation (default: 20)"
    )
    parser.add_argument(
        "--duration", "-d",
        type=int,
        default=180,
        help="Number of ticks to simulate (default: 180)"
    )
    parser.add_argument(
        "--interval", "-i",
        type=float,
        default=1.0,
        help="Real-time seconds between ticks (default: 1.0, 0 = no pacing)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run"
    )
    parser.add_argument(
        "--failure-prob",
        type=int,
        default=5,
        help="Per-tick random failure probability in percent (default: 5)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="orbit_latch.log",
        help="Alert log file (default: orbit_latch.log)"
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Also POST snapshots to this ingestion service, e.g. http://localhost:8080"
    )
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulatorConfig:
    return SimulatorConfig(
        num_satellites=args.satellites,
        duration_ticks=args.duration,
        tick_interval=args.interval,
        failure_prob=args.failure_prob,
        log_path=args.log_file,
        seed=args.seed,
        api_url=args.api_url,
        json_output=(args.mode == "json"),
    )


def report(driver: TickDriver, http_sink: Optional[HttpTelemetrySink]) -> None:
    """Log final statistics"""
    stats = driver.summary()

    logger.info("=" * 60)
    logger.info("FINAL STATISTICS")
    logger.info("=" * 60)
    logger.info(f"Ticks: {stats['ticks']}")
    logger.info(f"Link availability: {stats['availability']:.1f}%")
    logger.info(f"Connections: {stats['connections']} | Handovers: {stats['handovers']} | "
                f"Links lost: {stats['links_lost']}")
    logger.info(f"Active link RSSI (mean/min): {stats['link_rssi_mean']:.2f}/{stats['link_rssi_min']:.2f}")
    logger.info(f"Failed satellites: {stats['failed_satellites']}/{len(driver.state.satellites)}")
    logger.info(f"Alerts recorded: {stats['alerts_recorded']:,} (dropped: {stats['alerts_dropped']:,})")
    if http_sink is not None:
        logger.info(f"Telemetry delivered: {http_sink.stats['success']:,}/{http_sink.stats['total_sent']:,}")
    logger.info("=" * 60)


async def run(config: SimulatorConfig) -> TickDriver:
    driver = TickDriver(config, alert_sink=FileAlertSink(config.log_path))
    http_sink: Optional[HttpTelemetrySink] = None

    async with AsyncExitStack() as stack:
        sinks = []
        if config.json_output:
            sinks.append(JsonLineSink(sys.stdout))
        else:
            live = stack.enter_context(Live(console=Console(), refresh_per_second=4))
            sinks.append(ConsoleDashboard(live))

        if config.api_url:
            session = await stack.enter_async_context(aiohttp.ClientSession())
            http_sink = HttpTelemetrySink(session, config.api_url)
            sinks.append(http_sink)

        try:
            await driver.run(sinks)
        except (KeyboardInterrupt, asyncio.CancelledError):
            logger.info("Received interrupt signal, shutting down...")
        finally:
            config.running = False

    report(driver, http_sink)
    return driver


async def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as e:
        # Exits with status 2 and a usage line, like any other bad argument
        parser.error(str(e))

    if not config.json_output:
        print(BANNER)
        await asyncio.sleep(min(1.0, config.tick_interval))

    logger.info(f"Configuration: {config.num_satellites} satellites, {config.duration_ticks} ticks, "
                f"failure probability {config.failure_prob}%")

    await run(config)
    return 0


def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli()
