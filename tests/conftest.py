"""
Pytest configuration and fixtures for PBX exporter tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from pbx_exporter.telemetry.schemas import ServiceEntry, SystemStatusSnapshot, TrunkEntry


class FakePBXSource:
    """Status source whose results and failures are set per fetch."""

    def __init__(
        self,
        status: Optional[SystemStatusSnapshot] = None,
        services: Optional[List[ServiceEntry]] = None,
        trunks: Optional[List[TrunkEntry]] = None,
    ):
        self.status = status
        self.services = services or []
        self.trunks = trunks or []
        self.status_error: Optional[Exception] = None
        self.services_error: Optional[Exception] = None
        self.trunks_error: Optional[Exception] = None
        self.calls: List[str] = []

    async def fetch_system_status(self) -> SystemStatusSnapshot:
        self.calls.append("status")
        if self.status_error:
            raise self.status_error
        return self.status

    async def fetch_service_roster(self) -> List[ServiceEntry]:
        self.calls.append("services")
        if self.services_error:
            raise self.services_error
        return self.services

    async def fetch_trunk_roster(self) -> List[TrunkEntry]:
        self.calls.append("trunks")
        if self.trunks_error:
            raise self.trunks_error
        return self.trunks


@pytest.fixture
def now():
    """Fixed scrape instant."""
    return datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def status_snapshot(now):
    """Status snapshot with a backup one hour old and no maintenance window."""
    return SystemStatusSnapshot(
        blacklisted_ip_count=3,
        calls_active=10,
        max_sim_calls=50,
        extensions_total=20,
        extensions_registered=18,
        last_backup_time=now - timedelta(seconds=3600),
        maintenance_expires_at=None,
    )


@pytest.fixture
def services():
    return [
        ServiceEntry(name="PhoneSystem", status=4, cpu_usage=12.5, memory_used=104857600),
        ServiceEntry(name="MediaServer", status=1, cpu_usage=0.0, memory_used=52428800),
    ]


@pytest.fixture
def trunks():
    return [
        TrunkEntry(name="Provider A", is_registered=True),
        TrunkEntry(name="Provider B", is_registered=False),
        TrunkEntry(name="Provider C", is_registered=True),
    ]


@pytest.fixture
def fake_source(status_snapshot, services, trunks):
    """Status source where every fetch succeeds."""
    return FakePBXSource(status=status_snapshot, services=services, trunks=trunks)
