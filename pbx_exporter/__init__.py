"""PBX Exporter - Prometheus metrics for a PBX management API."""

__version__ = "1.0.0"
