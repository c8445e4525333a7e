"""Reconciliation cycle: resolve + read -> decide -> write, with retry-on-conflict.

One cycle runs to completion before the next. On a retryable write failure the
whole read -> decide -> write step is repeated with a fresh snapshot (never a
blind re-send of the old write), up to max_attempts per cycle.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

from prefix_list_monitor.diff import conflicting_entries, decide
from prefix_list_monitor.errors import MonitorError, WriteError, WriteErrorKind
from prefix_list_monitor.models import (
    CycleOutcome,
    CycleResult,
    ListSnapshot,
    NoChange,
    Replace,
)
from prefix_list_monitor.prefix_list.writer import check_capacity

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    IDLE = "idle"
    READING = "reading"
    DECIDING = "deciding"
    WRITING = "writing"
    CONFLICT_RETRY = "conflict_retry"
    DONE = "done"
    APPLIED = "applied"
    FAILED = "failed"


class Reconciler:
    """Keeps the single owned entry of a prefix list equal to <public ip>/<suffix>."""

    def __init__(
        self,
        resolver,
        reader,
        writer,
        list_id: str,
        description: str,
        cidr_suffix: int = 32,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        stop_event: threading.Event | None = None,
    ):
        self.resolver = resolver
        self.reader = reader
        self.writer = writer
        self.list_id = list_id
        self.description = description
        self.cidr_suffix = cidr_suffix
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.stop_event = stop_event or threading.Event()
        self.state = CycleState.IDLE
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="reconcile")

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    def _set_state(self, state: CycleState) -> None:
        logger.debug("Cycle state: %s -> %s", self.state.value, state.value)
        self.state = state

    def _resolve_and_read(self) -> tuple[str, ListSnapshot]:
        """Run resolver and reader in parallel; both must succeed."""
        ip_future = self._executor.submit(self.resolver.resolve)
        snapshot_future = self._executor.submit(self.reader.read, self.list_id)
        try:
            ip = ip_future.result()
        finally:
            # Wait for the read even if resolving failed, so no call outlives the cycle.
            snapshot_exc = snapshot_future.exception()
        if snapshot_exc is not None:
            raise snapshot_exc
        return ip, snapshot_future.result()

    def _fail(self, result: CycleResult, error: Exception) -> CycleResult:
        self._set_state(CycleState.FAILED)
        result.outcome = CycleOutcome.FAILED
        result.error = error
        logger.error(
            "Cycle failed | list: %s | attempts: %d | %s: %s",
            self.list_id,
            result.attempts,
            type(error).__name__,
            error,
        )
        return result

    def _abort(self, result: CycleResult) -> CycleResult:
        self._set_state(CycleState.IDLE)
        result.outcome = CycleOutcome.ABORTED
        logger.info("Cycle aborted by shutdown | list: %s | no write sent", self.list_id)
        return result

    def reconcile_once(self) -> CycleResult:
        """Run one full cycle. Never raises for expected failures; see CycleResult.error."""
        result = CycleResult(outcome=CycleOutcome.FAILED)
        logger.debug("Cycle start | list: %s", self.list_id)
        self._set_state(CycleState.READING)

        # Only the first read runs concurrently with resolving; the address does not
        # change within a cycle, so retries re-read the list alone.
        try:
            ip, snapshot = self._resolve_and_read()
        except MonitorError as e:
            return self._fail(result, e)
        logger.debug("Resolved IP: %s", ip)

        while True:
            if self.stop_event.is_set():
                return self._abort(result)

            self._set_state(CycleState.DECIDING)
            decision = decide(ip, snapshot, self.description, self.cidr_suffix)
            result.decision = decision

            if isinstance(decision, NoChange):
                self._set_state(CycleState.DONE)
                result.outcome = CycleOutcome.NO_CHANGE
                logger.info(
                    "No change | %s/%d already in %s (%s)",
                    ip,
                    self.cidr_suffix,
                    self.list_id,
                    snapshot.version,
                )
                return result

            self._log_decision(decision, snapshot)
            self._set_state(CycleState.WRITING)
            result.attempts += 1
            try:
                check_capacity(snapshot, decision)
                new_version = self.writer.apply(self.list_id, decision, snapshot.version)
            except WriteError as e:
                if not e.retryable:
                    return self._fail(result, e)
                if result.attempts >= self.max_attempts:
                    logger.warning(
                        "Giving up after %d attempt(s), deferring to next check | %s",
                        result.attempts,
                        e,
                    )
                    return self._fail(result, e)
                self._set_state(CycleState.CONFLICT_RETRY)
                level = logging.WARNING if e.kind is WriteErrorKind.VERSION_CONFLICT else logging.INFO
                logger.log(
                    level,
                    "Write rejected (%s), retry %d/%d with fresh read",
                    e,
                    result.attempts,
                    self.max_attempts - 1,
                )
                if self.stop_event.wait(self.retry_delay):
                    return self._abort(result)
                self._set_state(CycleState.READING)
                try:
                    snapshot = self.reader.read(self.list_id)
                except MonitorError as read_error:
                    return self._fail(result, read_error)
                continue
            except MonitorError as e:
                return self._fail(result, e)

            self._set_state(CycleState.APPLIED)
            result.outcome = CycleOutcome.APPLIED
            result.new_version = new_version
            logger.info("Successfully updated prefix list %s to version %s", self.list_id, new_version)
            return result

    def _log_decision(self, decision: Replace, snapshot: ListSnapshot) -> None:
        if decision.remove:
            logger.info(
                "Replacing %d old entries (%s) with new CIDR %s | %s",
                len(decision.remove),
                ", ".join(sorted(decision.remove)),
                decision.add,
                snapshot.version,
            )
        else:
            logger.info("Adding new CIDR %s to prefix list | %s", decision.add, snapshot.version)
        for entry in conflicting_entries(snapshot, decision.add, self.description):
            logger.warning(
                "CIDR %s is already in %s under description %r; the add will likely be rejected "
                "until that entry is removed",
                entry.cidr,
                self.list_id,
                entry.description,
            )
