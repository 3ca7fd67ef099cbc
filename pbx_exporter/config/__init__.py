"""Configuration for the PBX exporter."""

from pbx_exporter.config.settings import ConfigError, PBXExporterConfig

__all__ = ["ConfigError", "PBXExporterConfig"]
