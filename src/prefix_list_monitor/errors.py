"""Error taxonomy for resolver, prefix list reads/writes, and startup config."""

from enum import Enum


class MonitorError(Exception):
    """Base class for all prefix-list-monitor errors."""

    retryable = False


class ConfigError(MonitorError):
    """Invalid or missing configuration. Fatal at startup."""


class NetworkError(MonitorError):
    """IP service unreachable, non-2xx, or returned an unparsable body."""


class RemoteErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    AUTH = "auth"


class RemoteError(MonitorError):
    """Read-path failure against the remote prefix list."""

    def __init__(self, kind: RemoteErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        return self.kind is RemoteErrorKind.TRANSIENT

    def __str__(self) -> str:
        return f"{self.kind.value}: {super().__str__()}"


class WriteErrorKind(str, Enum):
    VERSION_CONFLICT = "version_conflict"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    TRANSIENT = "transient"


class WriteError(MonitorError):
    """Write-path failure. VERSION_CONFLICT and TRANSIENT are retried in-cycle."""

    def __init__(self, kind: WriteErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        return self.kind is not WriteErrorKind.CAPACITY_EXCEEDED

    def __str__(self) -> str:
        return f"{self.kind.value}: {super().__str__()}"
