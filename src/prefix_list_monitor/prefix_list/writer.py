"""Apply a Replace decision to a managed prefix list with optimistic concurrency."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from prefix_list_monitor.errors import WriteError, WriteErrorKind
from prefix_list_monitor.models import ListSnapshot, Replace, VersionToken
from prefix_list_monitor.prefix_list.client import to_write_error

logger = logging.getLogger(__name__)


def wire_changes(decision: Replace) -> tuple[list[str], list[str]]:
    """(cidrs to add, cidrs to remove) for one ModifyManagedPrefixList call.

    A CIDR cannot be both added and removed in one request; if the target is
    already owned it is simply left in place.
    """
    if decision.add in decision.remove:
        return [], sorted(decision.remove - {decision.add})
    return [decision.add], sorted(decision.remove)


def check_capacity(snapshot: ListSnapshot, decision: Replace) -> None:
    """Raise CAPACITY_EXCEEDED if the decision cannot fit into snapshot.max_entries."""
    if snapshot.max_entries is None:
        return
    add, remove = wire_changes(decision)
    after = len(snapshot.entries) - len(remove) + len(add)
    if after > snapshot.max_entries:
        raise WriteError(
            WriteErrorKind.CAPACITY_EXCEEDED,
            f"{snapshot.list_id} would hold {after} entries, max is {snapshot.max_entries}",
        )


class PrefixListWriter:
    """Submits one ModifyManagedPrefixList per decision, tagged with the observed version."""

    def __init__(self, client, description: str):
        self._client = client
        self.description = description

    def apply(self, list_id: str, decision: Replace, version: VersionToken) -> VersionToken:
        """Remove decision.remove and add decision.add atomically.

        Returns:
            New version reported by EC2 (informational)

        Raises:
            WriteError: VERSION_CONFLICT if version is stale, CAPACITY_EXCEEDED, or TRANSIENT
            RemoteError: AUTH or NOT_FOUND
        """
        add, remove = wire_changes(decision)
        if not add and not remove:
            return version
        for cidr in remove:
            logger.debug("Removing old entry: %s", cidr)
        for cidr in add:
            logger.debug("Adding new entry: %s", cidr)

        kwargs = {"PrefixListId": list_id, "CurrentVersion": version.value}
        if add:
            kwargs["AddEntries"] = [{"Cidr": c, "Description": self.description} for c in add]
        if remove:
            kwargs["RemoveEntries"] = [{"Cidr": c} for c in remove]

        try:
            resp = self._client.modify_managed_prefix_list(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise to_write_error(e, list_id) from e

        new_version = resp.get("PrefixList", {}).get("Version")
        if new_version is None:
            return VersionToken(version.value + 1)
        return VersionToken(int(new_version))
