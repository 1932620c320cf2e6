"""Configuration management for the key-pair session signer."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class KeyPairSettings(BaseModel):
    """Long-lived key pair used to bootstrap session credentials."""

    public_key_id: str | None = Field(default=None)
    private_key_file: str | None = Field(default=None)
    session_expiration: int = Field(
        default=0,
        description=(
            "Requested session duration in seconds. 0 uses the default; "
            "positive values must be within 900-3600."
        ),
    )


class StsSettings(BaseModel):
    region_id: str = Field(default="cn-hangzhou")
    domain: str = Field(default="sts.aliyuncs.com")
    connect_timeout_seconds: float = Field(default=5.0, ge=0.1, le=60.0)
    read_timeout_seconds: float = Field(default=10.0, ge=0.1, le=300.0)
    refresh_in_advance_scale: float = Field(default=0.95, gt=0.0, le=1.0)

    @field_validator("domain")
    @classmethod
    def _validate_domain(cls, value: str) -> str:
        candidate = value.strip().rstrip("/")
        if not candidate:
            raise ValueError("domain must not be empty")
        if "://" in candidate:
            raise ValueError("domain must be a host name, not a URL")
        return candidate


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    key_pair: KeyPairSettings = Field(default_factory=KeyPairSettings)
    sts: StsSettings = Field(default_factory=StsSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "public_key_id": "ALIBABA_CLOUD_PUBLIC_KEY_ID",
    "private_key_file": "ALIBABA_CLOUD_PRIVATE_KEY_FILE",
    "session_expiration": "ALIBABA_CLOUD_SESSION_EXPIRATION",
    "region_id": "ALIBABA_CLOUD_REGION_ID",
    "sts_domain": "ACS_STS_DOMAIN",
    "connect_timeout": "ACS_CONNECT_TIMEOUT_SECONDS",
    "read_timeout": "ACS_READ_TIMEOUT_SECONDS",
    "in_advance_scale": "ACS_REFRESH_IN_ADVANCE_SCALE",
}


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    return value.strip() or None


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    log_file_env = _env_str(ENV_KEYS["log_file"])
    private_key_file_env = _env_str(ENV_KEYS["private_key_file"])

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": str(Path(log_file_env).expanduser()) if log_file_env else None,
        },
        "key_pair": {
            "public_key_id": _env_str(ENV_KEYS["public_key_id"]),
            "private_key_file": (
                str(Path(private_key_file_env).expanduser()) if private_key_file_env else None
            ),
            "session_expiration": _env_int(
                ENV_KEYS["session_expiration"],
                KeyPairSettings().session_expiration,
            ),
        },
        "sts": {
            "region_id": os.getenv(ENV_KEYS["region_id"], StsSettings().region_id),
            "domain": os.getenv(ENV_KEYS["sts_domain"], StsSettings().domain),
            "connect_timeout_seconds": _env_float(
                ENV_KEYS["connect_timeout"],
                StsSettings().connect_timeout_seconds,
            ),
            "read_timeout_seconds": _env_float(
                ENV_KEYS["read_timeout"],
                StsSettings().read_timeout_seconds,
            ),
            "refresh_in_advance_scale": _env_float(
                ENV_KEYS["in_advance_scale"],
                StsSettings().refresh_in_advance_scale,
            ),
        },
    }

    try:
        settings = Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    return settings
