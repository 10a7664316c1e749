"""
Configuration Management.

Loads secrets from <config dir>/.env and settings from <config dir>/settings/*.yaml.
The config directory is $DIVER_CONFIG_DIR, falling back to ~/.config/diver.

Secrets (.env or DIVER_* environment variables):
    DIVER_UCP_USERNAME, DIVER_UCP_PASSWORD,
    DIVER_STORE_USERNAME, DIVER_STORE_PASSWORD

Settings (YAML):
    ucp.yaml      - Control plane timeout, TLS verification, token location
    store.yaml    - Docker Hub / billing endpoints, token location
    logging.yaml  - Logging configuration
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from diver.core.config_schema import LoggingSchema, StoreSchema, UCPSchema
from diver.core.exceptions import ConfigurationError

CONFIG_DIR_ENV = "DIVER_CONFIG_DIR"


def find_config_dir() -> Path:
    """Return the configuration directory (it does not have to exist)."""
    configured = os.environ.get(CONFIG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "diver"
    return Path.home() / ".config" / "diver"


def load_yaml_config(filename: str) -> dict[str, Any]:
    """
    Load a YAML configuration file from <config dir>/settings/.

    A missing file yields an empty mapping so the schema defaults apply.
    """
    config_path = find_config_dir() / "settings" / filename

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def expand_path(path: str) -> Path:
    """Expand ~ in a configured path."""
    return Path(path).expanduser()


class Settings(BaseSettings):
    """Secrets loaded from <config dir>/.env. Only user names and passwords."""

    ucp_username: str | None = None
    ucp_password: str | None = None
    store_username: str | None = None
    store_password: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="DIVER_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    try:
        raw = load_yaml_config(filename)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed YAML in {filename}:\n{e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Invalid configuration in {filename}: expected a mapping")
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._ucp = _load_validated(UCPSchema, "ucp.yaml")
        self._store = _load_validated(StoreSchema, "store.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def ucp(self) -> UCPSchema:
        """Control plane settings."""
        return self._ucp

    @property
    def store(self) -> StoreSchema:
        """Docker Store settings."""
        return self._store

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from the config directory."""
    env_path = find_config_dir() / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
