"""Scheduled jobs - one reconciliation cycle per tick."""

import logging

from prefix_list_monitor.models import CycleResult
from prefix_list_monitor.reconciler import Reconciler

logger = logging.getLogger(__name__)

_scheduler = None


def set_scheduler(scheduler) -> None:
    """Store scheduler ref for logging next run."""
    global _scheduler
    _scheduler = scheduler


def _log_next_run(job_id: str) -> None:
    if _scheduler:
        job = _scheduler.get_job(job_id)
        if job and job.next_run_time:
            logger.debug("Next %s: %s", job_id, job.next_run_time.strftime("%Y-%m-%d %H:%M:%S"))


def run_reconcile_job(reconciler: Reconciler) -> CycleResult | None:
    """Run one cycle. Errors never escape into the scheduler; the next tick starts fresh."""
    if reconciler.stop_event.is_set():
        logger.debug("Shutdown requested, skipping reconcile tick")
        return None
    try:
        result = reconciler.reconcile_once()
    except Exception as e:
        logger.exception("Reconcile cycle crashed: %s", e)
        result = None
    _log_next_run("reconcile")
    return result
