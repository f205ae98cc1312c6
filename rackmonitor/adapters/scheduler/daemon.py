"""Daemon scheduler adapter.

Implements a long-running asyncio loop that triggers monitoring sweeps
at a configurable interval. Sweeps are synchronous and run in a worker
thread so signal handling stays responsive.
"""

import asyncio
import logging
import signal
from typing import cast

from rackmonitor.core.exceptions import RackMonitorError
from rackmonitor.core.models import SweepResult
from rackmonitor.core.ports import MonitorPort

logger = logging.getLogger(__name__)

# Consecutive failed sweeps before the scheduler escalates to CRITICAL.
FAILURE_ALERT_THRESHOLD = 5


class DaemonScheduler:
    """Asyncio-based daemon scheduler for periodic monitoring sweeps."""

    def __init__(
        self,
        monitor: MonitorPort | None = None,
        poll_interval_seconds: float = 60,
    ):
        """Initialize daemon scheduler.

        Args:
            monitor: MonitorPort implementation to sweep (can be set later).
            poll_interval_seconds: Interval between sweeps in seconds.
        """
        self.monitor = monitor
        self.poll_interval_seconds = poll_interval_seconds
        self.running = False
        self.cycle_count = 0
        self._failure_count = 0

    async def start(self) -> None:
        """Start the daemon scheduler loop.

        Raises:
            ValueError: If monitor is not set.
        """
        if self.monitor is None:
            raise ValueError("monitor must be set before starting the scheduler")

        if self.running:
            logger.warning("Daemon scheduler already running")
            return

        self.running = True
        logger.info(
            f"Starting daemon scheduler with {self.poll_interval_seconds}s interval"
        )

        self._setup_signal_handlers()

        try:
            await self._run_loop()
        except asyncio.CancelledError:
            logger.info("Daemon scheduler cancelled")
        finally:
            self.running = False
            logger.info("Daemon scheduler stopped")

    async def stop(self) -> None:
        """Stop the daemon scheduler loop after the current sweep."""
        if not self.running:
            return

        logger.info("Stopping daemon scheduler...")
        self.running = False

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        try:
            loop = asyncio.get_running_loop()

            def _handle_signal(sig: int) -> None:
                logger.info(f"Received signal {sig}, initiating graceful shutdown...")
                asyncio.create_task(self.stop())

            loop.add_signal_handler(
                signal.SIGTERM, _handle_signal, signal.SIGTERM
            )
            loop.add_signal_handler(signal.SIGINT, _handle_signal, signal.SIGINT)
        except NotImplementedError:
            # Signal handlers not available on Windows
            logger.debug("Signal handlers not available on this platform")
        except RuntimeError as e:
            # add_signal_handler only works from the main thread
            logger.warning(f"Failed to set up signal handlers: {e}")

    async def _run_loop(self) -> None:
        """Main daemon loop."""
        monitor = cast(MonitorPort, self.monitor)
        loop = asyncio.get_running_loop()

        while self.running:
            self.cycle_count += 1
            cycle_number = self.cycle_count

            try:
                logger.debug(f"Starting sweep #{cycle_number}")
                start_time = loop.time()

                result = await asyncio.to_thread(monitor.monitor_racks)

                elapsed = loop.time() - start_time
                self._failure_count = 0
                logger.info(
                    f"Sweep #{cycle_number} completed in {elapsed:.2f}s: "
                    f"{result.servers_checked} servers, "
                    f"{result.inspect_incidents} to inspect, "
                    f"{result.replace_incidents} to replace"
                )

            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._failure_count += 1
                logger.error(
                    f"Error in sweep #{cycle_number}: {e} "
                    f"(consecutive failures: {self._failure_count})",
                    exc_info=not isinstance(e, RackMonitorError),
                )
                if self._failure_count >= FAILURE_ALERT_THRESHOLD:
                    logger.critical(
                        f"Monitoring sweep has failed {self._failure_count} "
                        f"consecutive times. Manual intervention may be required."
                    )

            if self.running:
                await asyncio.sleep(self.poll_interval_seconds)

    @property
    def consecutive_failures(self) -> int:
        return self._failure_count


async def run_single_cycle(monitor: MonitorPort) -> SweepResult:
    """Run a single monitoring sweep (non-daemon mode).

    Args:
        monitor: MonitorPort implementation to sweep.

    Raises:
        RackMonitorError: If the sweep fails.
    """
    try:
        logger.info("Running single monitoring sweep")
        result = await asyncio.to_thread(monitor.monitor_racks)
        logger.info(
            f"Sweep completed: {result.total_incidents} incidents across "
            f"{result.racks_checked} racks"
        )
        return result
    except Exception as e:
        logger.error(f"Error in monitoring sweep: {e}", exc_info=True)
        raise
