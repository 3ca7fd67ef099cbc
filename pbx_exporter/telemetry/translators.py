"""
Pure functions turning PBX snapshots into samples.
"""

from datetime import datetime
from typing import List, Optional

from pbx_exporter.telemetry import catalog
from pbx_exporter.telemetry.schemas import (
    Sample,
    ServiceEntry,
    SystemStatusSnapshot,
    TrunkEntry,
)

# Reported for a duration whose timestamp the PBX did not provide.
ABSENT_DURATION = -1.0


def seconds_between(start: Optional[datetime], end: Optional[datetime]) -> float:
    """Signed seconds from start to end, or ABSENT_DURATION if either is missing."""
    if start is None or end is None:
        return ABSENT_DURATION
    return (end - start).total_seconds()


def translate_status(snapshot: SystemStatusSnapshot, now: datetime) -> List[Sample]:
    """Map a status snapshot to the seven unlabeled system samples."""
    return [
        Sample(identity=catalog.BLACKLIST_SIZE, value=float(snapshot.blacklisted_ip_count)),
        Sample(identity=catalog.CALLS_ACTIVE, value=float(snapshot.calls_active)),
        Sample(identity=catalog.CALLS_LIMIT, value=float(snapshot.max_sim_calls)),
        Sample(identity=catalog.EXTENSIONS_TOTAL, value=float(snapshot.extensions_total)),
        Sample(
            identity=catalog.EXTENSIONS_REGISTERED,
            value=float(snapshot.extensions_registered),
        ),
        # seconds since last backup
        Sample(
            identity=catalog.BACKUP_AGE,
            value=seconds_between(snapshot.last_backup_time, now),
        ),
        # remaining time of maintenance
        Sample(
            identity=catalog.MAINTENANCE_REMAINING,
            value=seconds_between(now, snapshot.maintenance_expires_at),
        ),
    ]


def translate_service(entry: ServiceEntry) -> List[Sample]:
    """Map one service to its status, CPU and memory samples."""
    labels = (entry.name,)
    return [
        Sample(identity=catalog.SERVICE_STATUS, label_values=labels, value=float(entry.status)),
        Sample(identity=catalog.SERVICE_CPU, label_values=labels, value=float(entry.cpu_usage)),
        Sample(
            identity=catalog.SERVICE_MEMORY, label_values=labels, value=float(entry.memory_used)
        ),
    ]


def translate_trunk(entry: TrunkEntry) -> List[Sample]:
    """Map one trunk to its registration sample."""
    return [
        Sample(
            identity=catalog.TRUNK_REGISTERED,
            label_values=(entry.name,),
            value=1.0 if entry.is_registered else 0.0,
        )
    ]
