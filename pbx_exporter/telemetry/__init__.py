"""
PBX Exporter telemetry core.

Turns PBX status snapshots into Prometheus samples, one scrape at a time.

Principles:
- Fixed catalog: every metric is declared up front, data or not
- Isolation: one failing source never hides the others
- Stateless: nothing is cached between scrapes

Usage:
    from pbx_exporter.telemetry import ScrapeOrchestrator, render_samples

    orchestrator = ScrapeOrchestrator(source=client, fetch_timeout_seconds=10)
    samples = await orchestrator.collect_samples()
    body = render_samples(samples)
"""

from pbx_exporter.telemetry.catalog import CATALOG, describe_catalog
from pbx_exporter.telemetry.errors import (
    AuthenticationFailure,
    FetchError,
    FetchErrorKind,
    FetchTimeout,
    MalformedSnapshot,
    SourceUnavailable,
)
from pbx_exporter.telemetry.exposition import (
    ScrapeResultCollector,
    build_metric_families,
    render_samples,
)
from pbx_exporter.telemetry.orchestrator import ScrapeOrchestrator
from pbx_exporter.telemetry.protocols import PBXStatusSource
from pbx_exporter.telemetry.schemas import (
    MetricIdentity,
    Sample,
    ServiceEntry,
    SystemStatusSnapshot,
    TrunkEntry,
    ValueKind,
)
from pbx_exporter.telemetry.translators import (
    ABSENT_DURATION,
    translate_service,
    translate_status,
    translate_trunk,
)

__all__ = [
    # Catalog
    "CATALOG",
    "describe_catalog",
    # Orchestration
    "ScrapeOrchestrator",
    "PBXStatusSource",
    # Exposition
    "ScrapeResultCollector",
    "build_metric_families",
    "render_samples",
    # Translators
    "ABSENT_DURATION",
    "translate_status",
    "translate_service",
    "translate_trunk",
    # Schemas
    "MetricIdentity",
    "Sample",
    "ServiceEntry",
    "SystemStatusSnapshot",
    "TrunkEntry",
    "ValueKind",
    # Errors
    "FetchError",
    "FetchErrorKind",
    "AuthenticationFailure",
    "SourceUnavailable",
    "MalformedSnapshot",
    "FetchTimeout",
]
