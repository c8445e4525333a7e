"""Shared fixtures: an in-memory versioned prefix list and fake resolvers."""

import threading

import boto3
import pytest

from prefix_list_monitor.errors import NetworkError, WriteError, WriteErrorKind
from prefix_list_monitor.models import ListSnapshot, ManagedEntry, Replace, VersionToken
from prefix_list_monitor.prefix_list.writer import wire_changes
from prefix_list_monitor.reconciler import Reconciler

TAG = "Auto-updated host IP"
LIST_ID = "pl-0123456789abcdef0"


class FakePrefixList:
    """Versioned list that rejects writes carrying a stale version, like EC2 does."""

    def __init__(self, entries=(), version: int = 1, max_entries: int | None = 10):
        self.entries: list[ManagedEntry] = list(entries)
        self.version = version
        self.max_entries = max_entries
        self.reads = 0
        self.writes = 0
        self.rejected = 0
        # Called just before a write is checked; lets tests simulate another writer.
        self.before_write = None

    def owned(self, description: str = TAG) -> list[str]:
        return [e.cidr for e in self.entries if e.description == description]

    def external_edit(self, add=(), remove=()) -> None:
        """Another writer (console, other instance) modifies the list."""
        self.entries = [e for e in self.entries if e.cidr not in set(remove)]
        self.entries.extend(add)
        self.version += 1

    # reader interface
    def read(self, list_id: str) -> ListSnapshot:
        self.reads += 1
        return ListSnapshot(
            list_id=list_id,
            entries=tuple(self.entries),
            version=VersionToken(self.version),
            max_entries=self.max_entries,
        )

    # writer interface
    def apply(self, list_id: str, decision: Replace, version: VersionToken) -> VersionToken:
        if self.before_write is not None:
            self.before_write(self)
        if version.value != self.version:
            self.rejected += 1
            raise WriteError(WriteErrorKind.VERSION_CONFLICT, f"at v{self.version}, got {version}")
        add, remove = wire_changes(decision)
        self.entries = [e for e in self.entries if e.cidr not in set(remove)]
        self.entries.extend(ManagedEntry(c, TAG) for c in add)
        self.version += 1
        self.writes += 1
        return VersionToken(self.version)


class StaticResolver:
    def __init__(self, ip: str):
        self.ip = ip
        self.calls = 0

    def resolve(self) -> str:
        self.calls += 1
        return self.ip


class FailingResolver:
    def resolve(self) -> str:
        raise NetworkError("Failed to fetch current IP from https://api.ipify.org: connection refused")


@pytest.fixture
def remote():
    return FakePrefixList(
        entries=[
            ManagedEntry("198.51.100.5/32", TAG),
            ManagedEntry("10.0.0.0/8", "office VPN"),
        ],
        version=5,
    )


@pytest.fixture
def make_reconciler():
    created = []

    def _make(remote, resolver=None, writer=None, **kwargs):
        kwargs.setdefault("retry_delay", 0)
        r = Reconciler(
            resolver=resolver or StaticResolver("203.0.113.42"),
            reader=remote,
            writer=writer or remote,
            list_id=LIST_ID,
            description=TAG,
            stop_event=kwargs.pop("stop_event", threading.Event()),
            **kwargs,
        )
        created.append(r)
        return r

    yield _make
    for r in created:
        r.close()


@pytest.fixture
def ec2_client():
    """Real botocore client, meant to be wrapped in a Stubber (never hits the network)."""
    return boto3.client(
        "ec2",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No config leaking in from the environment or a local .env file."""
    for var in (
        "PREFIX_LIST_ID",
        "AWS_REGION",
        "ENTRY_DESCRIPTION",
        "CHECK_INTERVAL",
        "IP_SERVICE_URL",
        "CIDR_SUFFIX",
        "REQUEST_TIMEOUT",
        "MAX_ATTEMPTS",
        "RETRY_DELAY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
