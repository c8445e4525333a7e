"""Tests for the diff engine (pure, no I/O)."""

import pytest

from prefix_list_monitor.diff import conflicting_entries, decide, to_cidr
from prefix_list_monitor.models import ListSnapshot, ManagedEntry, NoChange, Replace, VersionToken

TAG = "Auto-updated host IP"


def snapshot(*entries):
    return ListSnapshot(
        list_id="pl-1",
        entries=tuple(ManagedEntry(c, d) for c, d in entries),
        version=VersionToken(5),
    )


def test_owned_entry_already_current_is_no_change():
    """Owned set equal to the target CIDR needs no write."""
    s = snapshot(("203.0.113.42/32", TAG), ("10.0.0.0/8", "office"))
    assert decide("203.0.113.42", s, TAG, 32) == NoChange()


def test_stale_owned_entry_is_replaced():
    """An old address is swapped for the observed one."""
    s = snapshot(("198.51.100.5/32", TAG))
    assert decide("203.0.113.42", s, TAG, 32) == Replace(
        remove=frozenset({"198.51.100.5/32"}), add="203.0.113.42/32"
    )


def test_no_owned_entries_adds_with_configured_suffix():
    """Nothing owned yet: add with the configured suffix, remove nothing."""
    s = snapshot(("10.0.0.0/8", "office"))
    assert decide("203.0.113.42", s, TAG, 24) == Replace(remove=frozenset(), add="203.0.113.42/24")


def test_empty_list_adds():
    """An empty list gets the target CIDR."""
    assert decide("203.0.113.42", snapshot(), TAG, 32) == Replace(remove=frozenset(), add="203.0.113.42/32")


@pytest.mark.parametrize(
    "owned",
    [
        ["198.51.100.5/32", "198.51.100.6/32"],
        ["198.51.100.5/32", "203.0.113.42/32"],
        ["192.0.2.1/32", "192.0.2.2/32", "192.0.2.3/32", "203.0.113.42/32"],
    ],
)
def test_multiple_owned_entries_all_removed(owned):
    """Converge to exactly one entry; never guess which duplicate was right."""
    s = snapshot(*[(c, TAG) for c in owned], ("10.0.0.0/8", "office"))
    decision = decide("203.0.113.42", s, TAG, 32)
    assert isinstance(decision, Replace)
    assert decision.remove == frozenset(owned)
    assert decision.add == "203.0.113.42/32"


def test_non_owned_entries_never_removed():
    """Same CIDR or a near-miss description is still someone else's entry."""
    s = snapshot(
        ("198.51.100.5/32", "auto-updated host ip"),
        ("198.51.100.7/32", TAG + " "),
        ("198.51.100.8/32", None),
        ("198.51.100.9/32", TAG),
    )
    decision = decide("203.0.113.42", s, TAG, 32)
    assert decision.remove == frozenset({"198.51.100.9/32"})


def test_same_cidr_with_other_description_does_not_count_as_owned():
    """Ownership is by description, not by CIDR."""
    s = snapshot(("203.0.113.42/32", "someone else"))
    assert decide("203.0.113.42", s, TAG, 32) == Replace(remove=frozenset(), add="203.0.113.42/32")


def test_replace_then_decide_again_is_fixed_point():
    """Deciding again on the post-write list is a no-op."""
    s = snapshot(("198.51.100.5/32", TAG), ("10.0.0.0/8", "office"))
    decision = decide("203.0.113.42", s, TAG, 32)
    after = snapshot(
        *[(e.cidr, e.description) for e in s.entries if e.cidr not in decision.remove],
        (decision.add, TAG),
    )
    assert decide("203.0.113.42", after, TAG, 32) == NoChange()


def test_to_cidr_keeps_address_and_suffix():
    """Address is kept as observed, not masked."""
    assert to_cidr("203.0.113.42", 32) == "203.0.113.42/32"
    assert to_cidr("203.0.113.42", 24) == "203.0.113.42/24"


def test_to_cidr_rejects_bad_suffix():
    """Suffix past 32 is not a valid IPv4 network."""
    with pytest.raises(ValueError):
        to_cidr("203.0.113.42", 33)


def test_conflicting_entries_lists_only_unowned_holders():
    """Owned entries and other CIDRs are not reported as conflicts."""
    s = snapshot(
        ("203.0.113.42/32", "partner VPN"),
        ("203.0.113.42/32", TAG),
        ("198.51.100.5/32", "office"),
    )
    assert conflicting_entries(s, "203.0.113.42/32", TAG) == [ManagedEntry("203.0.113.42/32", "partner VPN")]
    assert conflicting_entries(s, "192.0.2.1/32", TAG) == []
