"""
Scrape orchestrator that coordinates the three PBX status sources.

This is the central component: on every scrape it fetches system status, the service
roster and the trunk roster one after another, translates whatever arrived into
samples, and keeps one failing source from hiding the others.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from pbx_exporter.telemetry.catalog import CATALOG
from pbx_exporter.telemetry.errors import (
    FetchError,
    FetchErrorKind,
    FetchTimeout,
    MalformedSnapshot,
)
from pbx_exporter.telemetry.protocols import PBXStatusSource
from pbx_exporter.telemetry.schemas import (
    MetricIdentity,
    Sample,
    ServiceEntry,
    SystemStatusSnapshot,
    TrunkEntry,
)
from pbx_exporter.telemetry.translators import (
    translate_service,
    translate_status,
    translate_trunk,
)

logger = logging.getLogger(__name__)

SOURCE_STATUS = "SystemStatus"
SOURCE_SERVICES = "ServiceList"
SOURCE_TRUNKS = "TrunkList"


class ErrorPolicy(str, Enum):
    """What a scrape does after a fetch error."""

    ABORT = "abort"
    SKIP = "skip"


# Only the status fetch may abort the scrape; it runs first and shares credentials
# with the other two.
STATUS_ERROR_POLICY: Dict[FetchErrorKind, ErrorPolicy] = {
    FetchErrorKind.AUTHENTICATION: ErrorPolicy.ABORT,
    FetchErrorKind.SOURCE_UNAVAILABLE: ErrorPolicy.SKIP,
    FetchErrorKind.MALFORMED_SNAPSHOT: ErrorPolicy.SKIP,
    FetchErrorKind.TIMEOUT: ErrorPolicy.SKIP,
}

_STATUS_ADAPTER = TypeAdapter(SystemStatusSnapshot)
_SERVICES_ADAPTER = TypeAdapter(List[ServiceEntry])
_TRUNKS_ADAPTER = TypeAdapter(List[TrunkEntry])


class ScrapeOrchestrator:
    """
    Produces the complete sample list for one scrape.

    The orchestrator holds no per-scrape state, so overlapping scrapes are safe.
    """

    def __init__(
        self,
        source: PBXStatusSource,
        catalog: Sequence[MetricIdentity] = CATALOG,
        fetch_timeout_seconds: float = 10.0,
    ):
        """
        Initialize scrape orchestrator.

        Args:
            source: Status source providing the three fetch operations
            catalog: Metric identities that may be emitted
            fetch_timeout_seconds: Deadline applied to each individual fetch
        """
        self.source = source
        self.catalog = tuple(catalog)
        self.fetch_timeout_seconds = fetch_timeout_seconds
        self._declared = {identity.name for identity in self.catalog}

    def describe(self) -> Sequence[MetricIdentity]:
        """Return the advertised catalog."""
        return self.catalog

    async def collect_samples(self, now: Optional[datetime] = None) -> List[Sample]:
        """
        Run one scrape.

        Args:
            now: Instant used for every derived duration (defaults to current UTC time)

        Returns:
            Samples in source order: status, then services, then trunks.
            Empty if the PBX rejected our credentials.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        samples: List[Sample] = []

        try:
            status = await self._fetch(
                SOURCE_STATUS, self.source.fetch_system_status, _STATUS_ADAPTER
            )
            status_samples = self._translate(
                SOURCE_STATUS, lambda: translate_status(status, now)
            )
        except FetchError as e:
            if STATUS_ERROR_POLICY[e.kind] is ErrorPolicy.ABORT:
                logger.error(
                    f"authentication failed fetching {SOURCE_STATUS}, abandoning scrape: {e}"
                )
                return []
            logger.error(f"failed to fetch {SOURCE_STATUS}: {e}")
        else:
            samples.extend(status_samples)

        try:
            services = await self._fetch(
                SOURCE_SERVICES, self.source.fetch_service_roster, _SERVICES_ADAPTER
            )
            service_samples = self._translate(
                SOURCE_SERVICES,
                lambda: [s for service in services for s in translate_service(service)],
            )
        except FetchError as e:
            logger.error(f"failed to fetch {SOURCE_SERVICES}: {e}")
        else:
            samples.extend(service_samples)

        try:
            trunks = await self._fetch(
                SOURCE_TRUNKS, self.source.fetch_trunk_roster, _TRUNKS_ADAPTER
            )
            trunk_samples = self._translate(
                SOURCE_TRUNKS,
                lambda: [s for trunk in trunks for s in translate_trunk(trunk)],
            )
        except FetchError as e:
            logger.error(f"failed to fetch {SOURCE_TRUNKS}: {e}")
        else:
            samples.extend(trunk_samples)

        return self._declared_only(samples)

    async def _fetch(
        self,
        source_name: str,
        fetch: Callable[[], Awaitable[Any]],
        adapter: TypeAdapter,
    ) -> Any:
        """
        Invoke one fetcher under the deadline and check the shape of its result.

        Raises:
            FetchError: for every failure, tagged with the source name
        """
        try:
            result = await asyncio.wait_for(fetch(), timeout=self.fetch_timeout_seconds)
        except FetchError as e:
            if e.source is None:
                e.source = source_name
            raise
        except asyncio.TimeoutError:
            raise FetchTimeout(
                f"no response within {self.fetch_timeout_seconds}s", source=source_name
            )
        except Exception as e:
            raise MalformedSnapshot(
                f"unexpected {type(e).__name__}: {e}", source=source_name
            ) from e

        try:
            return adapter.validate_python(result)
        except ValidationError as e:
            raise MalformedSnapshot(
                f"invalid {source_name} payload: {e.error_count()} validation errors",
                source=source_name,
            ) from e

    @staticmethod
    def _translate(source_name: str, translate: Callable[[], List[Sample]]) -> List[Sample]:
        """Run a translator, reporting a snapshot it cannot map as malformed."""
        try:
            return translate()
        except Exception as e:
            raise MalformedSnapshot(
                f"cannot translate {source_name} snapshot: {type(e).__name__}: {e}",
                source=source_name,
            ) from e

    def _declared_only(self, samples: List[Sample]) -> List[Sample]:
        """Drop samples whose identity is not in the advertised catalog."""
        declared = [s for s in samples if s.identity.name in self._declared]
        if len(declared) != len(samples):
            dropped = sorted({s.identity.name for s in samples} - self._declared)
            logger.warning(f"Dropped samples for undeclared metrics: {', '.join(dropped)}")
        return declared
