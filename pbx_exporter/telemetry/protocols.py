"""
Protocols defining the contract between the exporter core and its status source.

The orchestrator only depends on these methods, so tests can inject fakes that fail
one source at a time.
"""

from typing import List, Protocol, runtime_checkable

from pbx_exporter.telemetry.schemas import (
    ServiceEntry,
    SystemStatusSnapshot,
    TrunkEntry,
)


@runtime_checkable
class PBXStatusSource(Protocol):
    """Protocol for anything that can fetch PBX state."""

    async def fetch_system_status(self) -> SystemStatusSnapshot:
        """
        Fetch the system-wide status.

        Promises:
        - Returns a fresh snapshot on every call
        - Raises AuthenticationFailure when credentials are rejected
        - Raises another FetchError subclass on any other failure
        """
        ...

    async def fetch_service_roster(self) -> List[ServiceEntry]:
        """
        Fetch the list of PBX services.

        Promises:
        - Returns entries in the order the PBX reports them
        - Raises FetchError on failure
        """
        ...

    async def fetch_trunk_roster(self) -> List[TrunkEntry]:
        """
        Fetch the list of SIP trunks.

        Promises:
        - Returns entries in the order the PBX reports them
        - Raises FetchError on failure
        """
        ...
