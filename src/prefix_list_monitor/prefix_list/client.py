"""boto3 EC2 client creation and mapping of AWS errors onto the monitor's taxonomy."""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from prefix_list_monitor.errors import RemoteError, RemoteErrorKind, WriteError, WriteErrorKind

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset(
    {
        "InvalidPrefixListID.NotFound",
        "InvalidPrefixListId.NotFound",
        "InvalidPrefixListID.Malformed",
    }
)
AUTH_CODES = frozenset(
    {
        "AuthFailure",
        "UnauthorizedOperation",
        "AccessDenied",
        "AccessDeniedException",
        "InvalidClientTokenId",
        "ExpiredToken",
        "SignatureDoesNotMatch",
    }
)
VERSION_CONFLICT_CODES = frozenset({"PrefixListVersionMismatch", "IncorrectState"})
CAPACITY_CODES = frozenset({"PrefixListMaxEntriesExceeded", "PrefixListEntryLimitExceeded"})


def create_ec2_client(region: str | None = None, timeout: float = 10.0):
    """EC2 client using the ambient credential chain. Region falls back to boto3 defaults."""
    config = Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        # One attempt per call: the reconciler owns retries.
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    session = boto3.Session(region_name=region) if region else boto3.Session()
    client = session.client("ec2", config=config)
    logger.debug("EC2 client created | region: %s", client.meta.region_name)
    return client


def error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")


def to_remote_error(e: Exception, list_id: str) -> RemoteError:
    """Classify a boto3/botocore exception raised while reading."""
    if isinstance(e, NoCredentialsError):
        return RemoteError(RemoteErrorKind.AUTH, f"No AWS credentials available: {e}")
    if isinstance(e, ClientError):
        code = error_code(e)
        if code in NOT_FOUND_CODES:
            return RemoteError(RemoteErrorKind.NOT_FOUND, f"Prefix list {list_id} not found ({code})")
        if code in AUTH_CODES:
            return RemoteError(RemoteErrorKind.AUTH, f"Not authorized to read {list_id}: {e}")
        return RemoteError(RemoteErrorKind.TRANSIENT, f"Reading {list_id} failed: {e}")
    if isinstance(e, BotoCoreError):
        return RemoteError(RemoteErrorKind.TRANSIENT, f"Reading {list_id} failed: {e}")
    raise TypeError(f"Not an AWS error: {type(e).__name__}")


def to_write_error(e: Exception, list_id: str) -> Exception:
    """Classify a boto3/botocore exception raised while modifying.

    Auth failures on write surface as RemoteError(AUTH), which is non-retryable.
    """
    if isinstance(e, NoCredentialsError):
        return RemoteError(RemoteErrorKind.AUTH, f"No AWS credentials available: {e}")
    if isinstance(e, ClientError):
        code = error_code(e)
        if code in VERSION_CONFLICT_CODES:
            return WriteError(WriteErrorKind.VERSION_CONFLICT, f"{list_id} changed concurrently ({code})")
        if code in CAPACITY_CODES:
            return WriteError(WriteErrorKind.CAPACITY_EXCEEDED, f"{list_id} has no room for a new entry ({code})")
        if code in AUTH_CODES:
            return RemoteError(RemoteErrorKind.AUTH, f"Not authorized to modify {list_id}: {e}")
        if code in NOT_FOUND_CODES:
            return RemoteError(RemoteErrorKind.NOT_FOUND, f"Prefix list {list_id} not found ({code})")
        return WriteError(WriteErrorKind.TRANSIENT, f"Modifying {list_id} failed: {e}")
    if isinstance(e, BotoCoreError):
        return WriteError(WriteErrorKind.TRANSIENT, f"Modifying {list_id} failed: {e}")
    raise TypeError(f"Not an AWS error: {type(e).__name__}")
