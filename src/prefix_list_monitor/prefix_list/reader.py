"""Read a consistent snapshot (entries + version) of a managed prefix list."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from prefix_list_monitor.errors import RemoteError, RemoteErrorKind
from prefix_list_monitor.models import ListSnapshot, ManagedEntry, VersionToken
from prefix_list_monitor.prefix_list.client import to_remote_error

logger = logging.getLogger(__name__)


class PrefixListReader:
    """Describe the list for its version, then fetch entries pinned to that version."""

    def __init__(self, client):
        self._client = client

    def describe(self, list_id: str) -> dict:
        """Raw DescribeManagedPrefixLists record for list_id."""
        try:
            resp = self._client.describe_managed_prefix_lists(PrefixListIds=[list_id])
        except (ClientError, BotoCoreError) as e:
            raise to_remote_error(e, list_id) from e
        lists = resp.get("PrefixLists", [])
        if not lists:
            raise RemoteError(RemoteErrorKind.NOT_FOUND, f"Prefix list {list_id} not found")
        return lists[0]

    def read(self, list_id: str) -> ListSnapshot:
        """Fetch all entries plus the version they belong to.

        Entries are requested with TargetVersion set to the described version, so a
        concurrent write between the two calls cannot yield a mismatched snapshot.

        Raises:
            RemoteError: NOT_FOUND, AUTH, or TRANSIENT
        """
        described = self.describe(list_id)
        version = VersionToken(int(described.get("Version", 0)))
        logger.debug(
            "Prefix list %s | version: %s | state: %s",
            list_id,
            version,
            described.get("State", "?"),
        )

        entries: list[ManagedEntry] = []
        try:
            paginator = self._client.get_paginator("get_managed_prefix_list_entries")
            for page in paginator.paginate(PrefixListId=list_id, TargetVersion=version.value):
                for e in page.get("Entries", []):
                    entries.append(ManagedEntry(cidr=e["Cidr"], description=e.get("Description")))
        except (ClientError, BotoCoreError) as e:
            raise to_remote_error(e, list_id) from e

        logger.debug("Read %d entries from %s at %s", len(entries), list_id, version)
        return ListSnapshot(
            list_id=list_id,
            entries=tuple(entries),
            version=version,
            max_entries=described.get("MaxEntries"),
        )
