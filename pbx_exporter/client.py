"""
Async client for the PBX management API.

Implements PBXStatusSource on top of httpx. Every failure is reported as a FetchError
subclass so the scrape orchestrator can decide what to do with it.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from pbx_exporter.telemetry.errors import (
    AuthenticationFailure,
    FetchTimeout,
    MalformedSnapshot,
    SourceUnavailable,
)
from pbx_exporter.telemetry.schemas import ServiceEntry, SystemStatusSnapshot, TrunkEntry

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/login"
SYSTEM_STATUS_PATH = "/api/SystemStatus"
SERVICE_LIST_PATH = "/api/ServiceList"
TRUNK_LIST_PATH = "/api/TrunkList"

AUTH_SUCCESS = "AuthSuccess"


class TrunkListEnvelope(BaseModel):
    """The trunk endpoint wraps its entries in a {"list": [...]} object."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    trunks: List[TrunkEntry] = Field(default_factory=list, alias="list")


_STATUS_ADAPTER = TypeAdapter(SystemStatusSnapshot)
_SERVICES_ADAPTER = TypeAdapter(List[ServiceEntry])
_TRUNKS_ADAPTER = TypeAdapter(TrunkListEnvelope)


class PBXClient:
    """Client for the PBX management API."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout_seconds: float = 10.0,
        verify_tls: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the PBX client.

        Args:
            base_url: Scheme, host and port of the PBX web interface
            username: Management console user
            password: Management console password
            timeout_seconds: Timeout for each HTTP request
            verify_tls: Verify the PBX certificate
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self._authenticated = False
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            verify=verify_tls,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "PBXClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    async def login(self) -> None:
        """
        Open a session on the PBX.

        The session cookie is kept by the underlying httpx client.

        Raises:
            AuthenticationFailure: if the PBX rejects the credentials
            SourceUnavailable: if the PBX cannot be reached
        """
        self._authenticated = False
        response = await self._send(
            "POST",
            LOGIN_PATH,
            "login",
            json={"Username": self.username, "Password": self.password},
        )

        if response.status_code in (401, 403):
            raise AuthenticationFailure(
                "PBX rejected credentials", source="login", status_code=response.status_code
            )
        if response.status_code >= 400:
            raise SourceUnavailable(
                "login request failed", source="login", status_code=response.status_code
            )

        body = response.text.strip().strip('"')
        if body != AUTH_SUCCESS:
            raise AuthenticationFailure(f"unexpected login response: {body[:100]!r}", source="login")

        self._authenticated = True
        logger.debug(f"Logged in to {self.base_url} as {self.username}")

    async def fetch_system_status(self) -> SystemStatusSnapshot:
        """Fetch the system-wide status."""
        data = await self._get_json(SYSTEM_STATUS_PATH, "SystemStatus")
        return self._parse(_STATUS_ADAPTER, data, "SystemStatus")

    async def fetch_service_roster(self) -> List[ServiceEntry]:
        """Fetch the list of PBX services."""
        data = await self._get_json(SERVICE_LIST_PATH, "ServiceList")
        return self._parse(_SERVICES_ADAPTER, data, "ServiceList")

    async def fetch_trunk_roster(self) -> List[TrunkEntry]:
        """Fetch the list of SIP trunks."""
        data = await self._get_json(TRUNK_LIST_PATH, "TrunkList")
        return self._parse(_TRUNKS_ADAPTER, data, "TrunkList").trunks

    async def _get_json(self, path: str, source: str) -> Any:
        """GET a JSON document, logging in first and once more if the session expired."""
        if not self._authenticated:
            await self.login()

        response = await self._send("GET", path, source)

        if response.status_code == 401:
            logger.info(f"PBX session expired while fetching {source}, logging in again")
            await self.login()
            response = await self._send("GET", path, source)
            if response.status_code == 401:
                self._authenticated = False
                raise AuthenticationFailure(
                    "PBX rejected session after login", source=source, status_code=401
                )

        if response.status_code >= 400:
            raise SourceUnavailable(
                f"{path} request failed", source=source, status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedSnapshot(f"{path} did not return JSON: {e}", source=source) from e

    async def _send(self, method: str, path: str, source: str, **kwargs) -> httpx.Response:
        """Send a request, translating transport failures into fetch errors."""
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise FetchTimeout(f"{path} timed out: {e}", source=source) from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"{path} request failed: {e}", source=source) from e

    @staticmethod
    def _parse(adapter: TypeAdapter, data: Any, source: str) -> Any:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise MalformedSnapshot(
                f"invalid {source} payload: {e.error_count()} validation errors", source=source
            ) from e
