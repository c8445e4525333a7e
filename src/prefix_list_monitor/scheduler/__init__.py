"""Scheduler – periodic reconciliation.

Jobs (runner.create_scheduler): reconcile (every CHECK_INTERVAL seconds, first run at startup).
A single instance of the job may run at a time; missed ticks are coalesced.
"""

from prefix_list_monitor.scheduler.runner import run_forever, start_scheduler

__all__ = ["run_forever", "start_scheduler"]
