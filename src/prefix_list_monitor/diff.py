"""Decide what to do with the remote list given the observed address.

Pure: no I/O, no failure modes. Only entries whose description equals the
management tag are ever inspected or scheduled for removal.
"""

import ipaddress

from prefix_list_monitor.models import ListSnapshot, ManagedEntry, NoChange, ReconcileDecision, Replace


def to_cidr(address: str, suffix: int) -> str:
    """Render <address>/<suffix>. The host bits of address are kept as-is."""
    ipaddress.ip_network(f"{address}/{suffix}", strict=False)
    return f"{address}/{suffix}"


def decide(
    observed: str,
    snapshot: ListSnapshot,
    managed_description: str,
    cidr_suffix: int,
) -> ReconcileDecision:
    """Return NoChange if the owned set is exactly {target}, else Replace(owned -> target).

    Multiple owned entries are all removed; which one was "right" is never guessed.
    """
    owned = snapshot.owned(managed_description)
    target = to_cidr(observed, cidr_suffix)
    if owned == {target}:
        return NoChange()
    return Replace(remove=owned, add=target)


def conflicting_entries(snapshot: ListSnapshot, cidr: str, managed_description: str) -> list[ManagedEntry]:
    """Non-owned entries already holding cidr. EC2 refuses a second entry with the same CIDR."""
    return [e for e in snapshot.entries if e.cidr == cidr and e.description != managed_description]
