"""Configuration models for the Snarkify prover.

The prover reads the orchestration framework's JSON config file and only
cares about its ``prover.cloud`` section. The Snarkify service identifier
is deployment specific and may come from a CLI flag, the
``SNARKIFY_SERVICE_ID`` environment variable or a small JSON file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_CONFIG_FILE = "config.json"


class CloudProverConfig(BaseModel):
    """Connection settings for a remote proving platform."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(..., min_length=1, description="Platform base URL.")
    api_key: SecretStr = Field(..., description="Value sent in the X-Api-Key header.")
    retry_count: int = Field(default=3, ge=0, description="Retries after the first attempt.")
    retry_wait_time_sec: int = Field(
        default=10,
        ge=0,
        description="Upper bound of the backoff between retries; the lower bound is half of it.",
    )
    connection_timeout_sec: int = Field(default=30, ge=1, description="Per-request timeout.")


class ProverConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    circuit_type: int | None = None
    circuit_version: str | None = None
    cloud: CloudProverConfig | None = None


class Config(BaseModel):
    """Top-level framework config; sections other than ``prover`` are kept as-is."""

    model_config = ConfigDict(extra="allow")

    prover: ProverConfig

    @classmethod
    def from_reader(cls, reader: IO[str]) -> "Config":
        try:
            data = json.load(reader)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Config is not valid JSON: {exc}") from exc
        return cls._validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        try:
            with Path(path).open(encoding="utf-8") as reader:
                return cls.from_reader(reader)
        except OSError as exc:
            raise ConfigurationError(f"Failed to read config file '{path}': {exc}") from exc

    @classmethod
    def _validate(cls, data: Any) -> "Config":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid config: {exc}") from exc


class SnarkifyConfig(BaseModel):
    """Service identifier file used by file-based deployments."""

    service_id: str = Field(..., min_length=1)

    @classmethod
    def from_reader(cls, reader: IO[str]) -> "SnarkifyConfig":
        try:
            return cls.model_validate_json(reader.read())
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid Snarkify config: {exc}") from exc

    @classmethod
    def from_file(cls, path: str | Path) -> "SnarkifyConfig":
        try:
            with Path(path).open(encoding="utf-8") as reader:
                return cls.from_reader(reader)
        except OSError as exc:
            raise ConfigurationError(f"Failed to read Snarkify config '{path}': {exc}") from exc


class ServiceSettings(BaseSettings):
    """Environment overrides (``SNARKIFY_*``)."""

    model_config = SettingsConfigDict(env_prefix="SNARKIFY_")

    service_id: str | None = Field(default=None, description="Snarkify service UUID.")


def require_cloud_config(config: Config) -> CloudProverConfig:
    if config.prover.cloud is None:
        raise ConfigurationError("Missing cloud prover configuration")
    return config.prover.cloud


def resolve_service_id(
    flag_value: str | None = None,
    service_config_path: str | Path | None = None,
) -> str:
    """Pick the service id: CLI flag, then environment, then config file."""
    if flag_value:
        return flag_value
    env_value = ServiceSettings().service_id
    if env_value:
        return env_value
    if service_config_path is not None:
        return SnarkifyConfig.from_file(service_config_path).service_id
    raise ConfigurationError(
        "Snarkify service id is required (--service-id, SNARKIFY_SERVICE_ID or --service-config)"
    )


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "CloudProverConfig",
    "ProverConfig",
    "Config",
    "SnarkifyConfig",
    "ServiceSettings",
    "require_cloud_config",
    "resolve_service_id",
]
