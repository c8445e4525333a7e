"""Scheduler runner - interval reconciliation with graceful shutdown.

- reconcile: every check_interval seconds, first run immediately at startup
- max_instances=1 so cycles never overlap; coalesce so a slow cycle doesn't queue a backlog
- SIGTERM / SIGINT set the stop event: the sleep ends and an in-flight cycle stops before its next write
"""

import logging
import signal
import threading
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from prefix_list_monitor.reconciler import Reconciler
from prefix_list_monitor.scheduler.jobs import run_reconcile_job, set_scheduler

logger = logging.getLogger(__name__)


def create_scheduler(reconciler: Reconciler, interval: int) -> BackgroundScheduler:
    """Create and configure the scheduler with the single reconcile job."""
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_reconcile_job,
        trigger="interval",
        seconds=interval,
        args=[reconciler],
        id="reconcile",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
    )
    set_scheduler(scheduler)
    return scheduler


def start_scheduler(reconciler: Reconciler, interval: int) -> BackgroundScheduler:
    """Start the scheduler. Call from main."""
    scheduler = create_scheduler(reconciler, interval)
    scheduler.start()
    logger.info("Scheduler running. Reconcile every %ds.", interval)
    return scheduler


def install_signal_handlers(stop_event: threading.Event) -> None:
    """SIGTERM/SIGINT -> stop_event. Must be called from the main thread."""

    def _handle(signum, _frame):
        logger.info("Received %s, shutting down", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def run_forever(reconciler: Reconciler, interval: int) -> None:
    """Run until the reconciler's stop event is set, then wait for any in-flight cycle."""
    stop_event = reconciler.stop_event
    install_signal_handlers(stop_event)
    scheduler = start_scheduler(reconciler, interval)
    try:
        while not stop_event.wait(1.0):
            pass
    finally:
        stop_event.set()
        scheduler.shutdown(wait=True)
        reconciler.close()
        logger.info("Scheduler stopped.")
