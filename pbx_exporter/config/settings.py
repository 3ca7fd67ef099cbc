"""
Configuration settings for the PBX exporter.

Settings are read from a YAML file; a handful of environment variables override the
file so credentials can be kept out of it.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or is incomplete."""

    pass


class PBXConfig(BaseModel):
    """Connection to the PBX management API."""

    base_url: str = Field(default="", description="e.g. https://pbx.example.com:5001")
    username: str = ""
    password: str = ""
    verify_tls: bool = True
    timeout_seconds: float = Field(default=10.0, gt=0)


class ExporterConfig(BaseModel):
    """Metrics HTTP endpoint settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=9523, gt=0, le=65535)
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: Optional[str] = None
    use_json: bool = False


# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "PBX_BASE_URL": ("pbx", "base_url"),
    "PBX_USERNAME": ("pbx", "username"),
    "PBX_PASSWORD": ("pbx", "password"),
    "PBX_EXPORTER_HOST": ("exporter", "host"),
    "PBX_EXPORTER_PORT": ("exporter", "port"),
}


class PBXExporterConfig(BaseModel):
    """Complete PBX exporter configuration."""

    pbx: PBXConfig = Field(default_factory=PBXConfig)
    exporter: ExporterConfig = Field(default_factory=ExporterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str) -> "PBXExporterConfig":
        """
        Load configuration from a YAML file and apply environment overrides.

        Raises:
            ConfigError: if the file is missing, unreadable, invalid or lacks credentials
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PBXExporterConfig":
        """Build configuration from a mapping, applying environment overrides."""
        merged = apply_env_overrides(data, os.environ)
        try:
            config = cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        config.require_credentials()
        return config

    def require_credentials(self) -> None:
        """Ensure everything needed to talk to the PBX is present."""
        missing = [
            key for key in ("base_url", "username", "password") if not getattr(self.pbx, key)
        ]
        if missing:
            raise ConfigError(f"Missing PBX settings: {', '.join('pbx.' + m for m in missing)}")

    def save(self, path: str) -> None:
        """Write configuration to a YAML file."""
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)


def apply_env_overrides(data: Dict[str, Any], environ: Dict[str, str]) -> Dict[str, Any]:
    """Return a copy of data with environment overrides merged in."""
    merged = {
        section: dict(values) if isinstance(values, dict) else values
        for section, values in data.items()
        if values is not None
    }
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            merged.setdefault(section, {})[key] = value
    return merged
