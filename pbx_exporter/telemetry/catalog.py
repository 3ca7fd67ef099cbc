"""
The fixed catalog of metrics the exporter may ever emit.

Every sample produced by a scrape refers to one of these identities. The catalog is
built once at import time and never changes, so it can be advertised to the
collector before (or without) any data being fetched.
"""

from typing import Tuple

from pbx_exporter.telemetry.schemas import MetricIdentity, ValueKind

PREFIX = "pbx_"

NAME_LABEL = ("name",)


def _identity(
    name: str, help_text: str, kind: ValueKind = ValueKind.GAUGE, label_names: Tuple[str, ...] = ()
) -> MetricIdentity:
    return MetricIdentity(name=PREFIX + name, help=help_text, kind=kind, label_names=label_names)


# System status
BLACKLIST_SIZE = _identity("blacklist_size", "Number of blacklisted IP addresses")
CALLS_ACTIVE = _identity("calls_active", "Number of current active calls")
CALLS_LIMIT = _identity("calls_limit", "Maximum number of supported simultaneous calls")
EXTENSIONS_TOTAL = _identity("extensions_total", "Number of total extensions")
EXTENSIONS_REGISTERED = _identity("extensions_registered", "Number of registered extensions")
BACKUP_AGE = _identity("backup_age", "Age of last backup in seconds", ValueKind.COUNTER)
MAINTENANCE_REMAINING = _identity(
    "maintenance_remaining", "Remaining time of maintenance in seconds", ValueKind.COUNTER
)

# Per service
SERVICE_STATUS = _identity("service_status", "Status of service", label_names=NAME_LABEL)
SERVICE_CPU = _identity("service_cpu", "CPU usage of service", label_names=NAME_LABEL)
SERVICE_MEMORY = _identity("service_memory", "Memory usage of service", label_names=NAME_LABEL)

# Per trunk
TRUNK_REGISTERED = _identity("trunk_registered", "Status of trunk", label_names=NAME_LABEL)

CATALOG: Tuple[MetricIdentity, ...] = (
    BLACKLIST_SIZE,
    CALLS_ACTIVE,
    CALLS_LIMIT,
    EXTENSIONS_TOTAL,
    EXTENSIONS_REGISTERED,
    BACKUP_AGE,
    MAINTENANCE_REMAINING,
    SERVICE_STATUS,
    SERVICE_CPU,
    SERVICE_MEMORY,
    TRUNK_REGISTERED,
)


def describe_catalog() -> Tuple[MetricIdentity, ...]:
    """Return every metric identity the exporter may emit, in declared order."""
    return CATALOG
