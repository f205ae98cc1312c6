"""Composition root for the rack health monitor.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Entry point selection (daemon or single sweep)
"""

import asyncio
import logging
import sys

from rackmonitor.adapters.fulfillment.stdout import StdoutFulfillmentAdapter
from rackmonitor.adapters.inventory.json_file import load_inventory
from rackmonitor.adapters.scheduler.daemon import DaemonScheduler, run_single_cycle
from rackmonitor.config import Settings, load_settings
from rackmonitor.core.ports import FulfillmentPort
from rackmonitor.core.rack_monitor import RackMonitor


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_monitor(
    settings: Settings, fulfillment: FulfillmentPort | None = None
) -> RackMonitor:
    """Wire adapters into a RackMonitor.

    Args:
        settings: Validated settings.
        fulfillment: Fulfillment client; defaults to the stdout adapter.

    Raises:
        ConfigurationError: If the inventory cannot be loaded.
    """
    logger = logging.getLogger(__name__)

    inventory = load_inventory(settings.inventory_path, settings.health_path)

    if fulfillment is None:
        fulfillment = StdoutFulfillmentAdapter(verbose=settings.verbose)
        logger.info("Fulfillment adapter: Stdout")

    return RackMonitor(
        racks=inventory.racks,
        fulfillment=fulfillment,
        warranty=inventory.warranties,
        shaky_threshold=settings.shaky_threshold,
        unhealthy_threshold=settings.unhealthy_threshold,
    )


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the application.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Load inventory and instantiate adapters
    4. Initialize the monitor
    5. Select and start run mode
    """
    settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading rack health monitor...")

    monitor = build_monitor(settings)
    logger.info(
        f"Monitoring {len(monitor.racks)} racks "
        f"(unhealthy < {settings.unhealthy_threshold}, "
        f"shaky < {settings.shaky_threshold})"
    )

    logger.info(f"Starting in {settings.run_mode} mode...")
    if settings.run_mode == "daemon":
        scheduler = DaemonScheduler(
            monitor=monitor,
            poll_interval_seconds=settings.poll_interval_seconds,
        )
        await scheduler.start()
    else:
        await run_single_cycle(monitor)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
