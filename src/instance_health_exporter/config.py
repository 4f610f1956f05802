"""Configuration management using Pydantic Settings.

Loads configuration from multiple sources with the following priority (highest first):
1. Environment variables (INSTANCE_HEALTH_* prefix)
2. .env file
3. config.local.yaml (if exists)
4. config.yaml
5. Default values
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# REST path exposed by the Atlassian Troubleshooting and Support Tools plugin
CHECK_PATH = "/rest/troubleshooting/1.0/check/"


class TargetSettings(BaseModel):
    """Upstream Jira/Confluence instance to scrape."""

    scheme: Literal["http", "https"] = "https"
    fqdn: str = ""
    token: str = ""
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Deadline for one upstream call, including the body read",
    )
    max_entries: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on health checks exported per scrape (unset = unlimited)",
    )

    @property
    def url(self) -> str:
        """Full URL of the instance health endpoint."""
        return f"{self.scheme}://{self.fqdn}{CHECK_PATH}"


class ServerSettings(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 9998


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"
    color: bool = False


def _load_yaml_config(config_dir: Path) -> dict:
    """Load configuration from YAML files.

    Loads config.yaml and optionally overlays config.local.yaml.
    """
    config = {}

    config_file = config_dir / "config.yaml"
    if config_file.exists():
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

    local_config_file = config_dir / "config.local.yaml"
    if local_config_file.exists():
        with open(local_config_file) as f:
            local_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, local_config)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Settings(BaseSettings):
    """Exporter settings loaded from environment, .env, and config files."""

    model_config = SettingsConfigDict(
        env_prefix="INSTANCE_HEALTH_",
        env_nested_delimiter="__",
        env_file=Path.home() / "instance_health.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    target: TargetSettings = Field(default_factory=TargetSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Direct environment variable mappings for the two required values
    atlassian_fqdn: str | None = Field(default=None, validation_alias="ATLASSIAN_FQDN")
    atlassian_token: str | None = Field(default=None, validation_alias="ATLASSIAN_TOKEN")

    def __init__(self, config_dir: Path | None = None, **data):
        """Initialize settings, loading from YAML if config_dir provided."""
        if config_dir is not None:
            yaml_config = _load_yaml_config(config_dir)
            # Explicit data wins over YAML
            merged = _deep_merge(yaml_config, data)
            super().__init__(**merged)
        else:
            super().__init__(**data)

        if self.atlassian_fqdn and not self.target.fqdn:
            self.target.fqdn = self.atlassian_fqdn

        if self.atlassian_token and not self.target.token:
            self.target.token = self.atlassian_token

    def validate_required(self) -> None:
        """Validate that required settings are present.

        Raises:
            ValueError: If the target fqdn or token is missing.
        """
        if not self.target.token:
            raise ValueError("ATLASSIAN_TOKEN environment variable or target.token config is required")

        if not self.target.fqdn:
            raise ValueError("ATLASSIAN_FQDN environment variable or target.fqdn config is required")


@lru_cache
def get_settings(config_dir: Path | None = None) -> Settings:
    """Get cached settings instance.

    Args:
        config_dir: Optional path to config directory. If None, only environment
                   variables and .env file are used.

    Returns:
        Settings instance.
    """
    if config_dir is None:
        # Try to find config directory relative to project root
        project_root = Path(__file__).parent.parent.parent
        default_config_dir = project_root / "config"
        if default_config_dir.exists():
            config_dir = default_config_dir

    return Settings(config_dir=config_dir)
