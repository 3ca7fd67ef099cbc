"""
Type-safe schemas for the PBX exporter.

These schemas define the metric identities the exporter advertises, the samples it
emits, and the snapshots fetched from the PBX management API. Snapshot models accept
the API's PascalCase keys through aliases and ignore everything else.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# ENUMS - No magic strings
# ============================================================================


class ValueKind(str, Enum):
    """Prometheus value kind of a metric identity."""

    GAUGE = "gauge"
    COUNTER = "counter"


# ============================================================================
# METRIC IDENTITIES AND SAMPLES
# ============================================================================


class MetricIdentity(BaseModel):
    """A metric name, its help text, value kind and label schema."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    help: str = Field(min_length=1)
    kind: ValueKind
    label_names: Tuple[str, ...] = ()


class Sample(BaseModel):
    """One value of one metric identity, emitted for a single scrape."""

    model_config = ConfigDict(frozen=True)

    identity: MetricIdentity
    label_values: Tuple[str, ...] = ()
    value: float

    @model_validator(mode="after")
    def validate_label_arity(self) -> "Sample":
        """Label values must line up with the identity's label names."""
        expected = len(self.identity.label_names)
        if len(self.label_values) != expected:
            raise ValueError(
                f"{self.identity.name} expects {expected} label values, "
                f"got {len(self.label_values)}"
            )
        return self

    @property
    def labels(self) -> dict[str, str]:
        """Label names mapped to their values."""
        return dict(zip(self.identity.label_names, self.label_values))


# ============================================================================
# PBX SNAPSHOTS - Shapes returned by the management API
# ============================================================================


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SystemStatusSnapshot(BaseModel):
    """System-wide counters and timestamps from the status endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    blacklisted_ip_count: int = Field(0, alias="BlacklistedIpCount")
    calls_active: int = Field(0, alias="CallsActive")
    max_sim_calls: int = Field(0, alias="MaxSimCalls")
    extensions_total: int = Field(0, alias="ExtensionsTotal")
    extensions_registered: int = Field(0, alias="ExtensionsRegistered")

    last_backup_time: Optional[datetime] = Field(None, alias="LastBackupDateTime")
    maintenance_expires_at: Optional[datetime] = Field(None, alias="MaintenanceExpiresAt")

    @field_validator("last_backup_time", "maintenance_expires_at", mode="before")
    @classmethod
    def blank_timestamp_is_absent(cls, value: Any) -> Any:
        """The API reports a missing timestamp as null or an empty string."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("last_backup_time", "maintenance_expires_at")
    @classmethod
    def naive_timestamp_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class ServiceEntry(BaseModel):
    """One entry of the service roster."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(alias="Name")
    status: int = Field(alias="Status")
    cpu_usage: float = Field(0.0, alias="CpuUsage")
    memory_used: float = Field(0.0, alias="MemoryUsed")


class TrunkEntry(BaseModel):
    """One entry of the trunk roster."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(alias="Name")
    is_registered: bool = Field(False, alias="IsRegistered")
