"""Pydantic settings for prefix-list-monitor configuration."""

import logging
import os
from dataclasses import dataclass
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from prefix_list_monitor.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Auto-updated host IP"


@dataclass(frozen=True)
class MonitorConfig:
    """Validated configuration handed to the reconciler and scheduler."""

    prefix_list_id: str
    region: str | None
    description: str
    check_interval: int
    ip_service_url: str
    cidr_suffix: int
    request_timeout: float
    max_attempts: int
    retry_delay: float
    log_level: str
    once: bool = False


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required. PREFIX_LIST_ID env, e.g. pl-0123456789abcdef0
    prefix_list_id: str = ""
    # Unset: boto3 resolves region from AWS_DEFAULT_REGION / profile.
    aws_region: str | None = None

    entry_description: str = DEFAULT_DESCRIPTION
    check_interval: int = Field(default=300, ge=1)
    ip_service_url: str = "https://api.ipify.org"
    cidr_suffix: int = Field(default=32, ge=0, le=32)

    # Per-call timeout for the IP service and EC2 API (seconds).
    request_timeout: float = Field(default=10.0, gt=0)
    # Write attempts per cycle (read -> decide -> write) before deferring to next tick.
    max_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=1.0, ge=0)

    log_level: str = "INFO"

    @field_validator("prefix_list_id", "entry_description", "ip_service_url")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("cidr_suffix", mode="before")
    @classmethod
    def _drop_slash(cls, v: Any) -> Any:
        # Accept "/32" as well as "32".
        if isinstance(v, str):
            return v.strip().lstrip("/")
        return v

    @field_validator("log_level")
    @classmethod
    def _level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level


def get_settings(**overrides: Any) -> Settings:
    """Get application settings. Non-None overrides win over env / .env."""
    values = {k: v for k, v in overrides.items() if v is not None}
    return Settings(**values)


def load_config(once: bool = False, **overrides: Any) -> MonitorConfig:
    """Build a validated MonitorConfig.

    Raises:
        ConfigError: On any invalid value or a missing prefix list id
    """
    try:
        s = get_settings(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e

    if not s.prefix_list_id:
        raise ConfigError("Missing prefix list id. Set PREFIX_LIST_ID or pass --prefix-list-id.")
    if not s.entry_description:
        raise ConfigError("Entry description must not be empty (ENTRY_DESCRIPTION).")
    if not s.ip_service_url.startswith(("http://", "https://")):
        raise ConfigError(f"IP service URL must be http(s): {s.ip_service_url!r}")

    config = MonitorConfig(
        prefix_list_id=s.prefix_list_id,
        region=s.aws_region or None,
        description=s.entry_description,
        check_interval=s.check_interval,
        ip_service_url=s.ip_service_url,
        cidr_suffix=s.cidr_suffix,
        request_timeout=s.request_timeout,
        max_attempts=s.max_attempts,
        retry_delay=s.retry_delay,
        log_level=s.log_level,
        once=once,
    )
    logger.debug("load_config: %s", config)
    return config
