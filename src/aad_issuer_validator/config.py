"""
Configuration management for the issuer validator.

Loads configuration from YAML into strict pydantic models.
Unknown keys are rejected and every section must be present.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from aad_issuer_validator.constants import OIDC_METADATA_PATH

CONFIG_PATH_ENV_VAR = "CONFIG_PATH"
DEFAULT_CONFIG_FILENAME = "config.yaml"


class ServiceConfig(BaseModel):
    """Service identity configuration."""

    model_config = ConfigDict(extra="forbid")
    name: str
    version: str


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")
    level: str


class DiscoveryConfig(BaseModel):
    """OpenID Connect discovery endpoint configuration."""

    model_config = ConfigDict(extra="forbid")
    metadata_path: str = OIDC_METADATA_PATH
    timeout_seconds: float = Field(gt=0)


class ValidationConfig(BaseModel):
    """Authority and issuer templates used to validate tokens.

    Exposes ``valid_issuer`` and ``valid_issuers`` so it can be handed to
    ``IssuerValidator.validate`` as validation parameters directly.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
    authority: str
    valid_issuer: str | None = None
    valid_issuers: tuple[str, ...] | None = None


class Settings(BaseModel):
    """
    Root configuration container.

    Missing sections cause immediate startup failure.
    """

    model_config = ConfigDict(extra="forbid")
    service: ServiceConfig
    logging: LoggingConfig
    discovery: DiscoveryConfig
    validation: ValidationConfig


def get_config_path() -> Path:
    """Determine configuration file path.

    The ``CONFIG_PATH`` environment variable wins; otherwise ``config.yaml``
    in the current working directory is used.
    """
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def load_settings(config_path: Path) -> Settings:
    """Load and validate settings from an explicit YAML file."""
    raw = yaml.safe_load(config_path.read_text())
    if not isinstance(raw, dict):
        msg = f"Invalid config file: {config_path}"
        raise ValueError(msg)
    return Settings(**raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from the resolved configuration path."""
    return load_settings(get_config_path())


def clear_settings_cache() -> None:
    """Forget cached settings so the next call reloads the file."""
    get_settings.cache_clear()
