"""Data model for one reconciliation cycle: entries, snapshots, decisions, results."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class ManagedEntry:
    """One row of the remote prefix list."""

    cidr: str
    description: str | None = None


@dataclass(frozen=True, order=True)
class VersionToken:
    """Opaque, comparable version of the remote list. Advanced only by the remote side."""

    value: int

    def __str__(self) -> str:
        return f"v{self.value}"


@dataclass(frozen=True)
class ListSnapshot:
    """All entries of the list (owned or not) as of a single version."""

    list_id: str
    entries: tuple[ManagedEntry, ...]
    version: VersionToken
    max_entries: int | None = None

    def owned(self, description: str) -> frozenset[str]:
        """CIDRs whose description matches exactly (case-sensitive)."""
        return frozenset(e.cidr for e in self.entries if e.description == description)


@dataclass(frozen=True)
class NoChange:
    """Owned set is already exactly the target CIDR."""


@dataclass(frozen=True)
class Replace:
    """Remove every owned entry, add the single target CIDR."""

    remove: frozenset[str]
    add: str


ReconcileDecision = NoChange | Replace


class CycleOutcome(str, Enum):
    APPLIED = "applied"
    NO_CHANGE = "no_change"
    FAILED = "failed"
    ABORTED = "aborted"

    @property
    def ok(self) -> bool:
        return self is not CycleOutcome.FAILED


@dataclass
class CycleResult:
    """Terminal state of one cycle, returned by Reconciler.reconcile_once()."""

    outcome: CycleOutcome
    decision: ReconcileDecision | None = None
    attempts: int = 0
    error: Exception | None = field(default=None, repr=False)
    new_version: VersionToken | None = None
