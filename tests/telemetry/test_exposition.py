"""
Unit tests for the prometheus_client exposition bridge.
"""

from prometheus_client import CollectorRegistry

from pbx_exporter.telemetry import catalog
from pbx_exporter.telemetry.exposition import (
    ScrapeResultCollector,
    build_metric_families,
    render_samples,
)
from pbx_exporter.telemetry.schemas import ServiceEntry, TrunkEntry
from pbx_exporter.telemetry.translators import (
    translate_service,
    translate_status,
    translate_trunk,
)


class TestBuildMetricFamilies:
    """Test grouping samples into metric families."""

    def test_families_follow_catalog_order(self, status_snapshot, now):
        """Test families come out in catalog order whatever the sample order."""
        samples = translate_trunk(TrunkEntry(name="A", is_registered=True))
        samples += translate_status(status_snapshot, now)

        families = build_metric_families(samples)

        assert [f.name for f in families] == [
            "pbx_blacklist_size",
            "pbx_calls_active",
            "pbx_calls_limit",
            "pbx_extensions_total",
            "pbx_extensions_registered",
            "pbx_backup_age",
            "pbx_maintenance_remaining",
            "pbx_trunk_registered",
        ]

    def test_value_kinds(self, status_snapshot, now):
        """Test duration metrics are exposed untyped and the rest as gauges."""
        families = {f.name: f for f in build_metric_families(translate_status(status_snapshot, now))}

        assert families["pbx_backup_age"].type == "unknown"
        assert families["pbx_calls_active"].type == "gauge"

    def test_labeled_samples_share_a_family(self):
        """Test one family per identity with one sample per entry."""
        samples = translate_service(ServiceEntry(name="A", status=1))
        samples += translate_service(ServiceEntry(name="B", status=0))

        families = build_metric_families(samples)

        status = families[0]
        assert status.name == "pbx_service_status"
        assert [(s.labels, s.value) for s in status.samples] == [
            ({"name": "A"}, 1.0),
            ({"name": "B"}, 0.0),
        ]

    def test_no_samples_no_families(self):
        assert build_metric_families([]) == []


class TestScrapeResultCollector:
    """Test the custom collector."""

    def test_describe_advertises_whole_catalog(self):
        """Test the catalog is described even without data."""
        collector = ScrapeResultCollector([])

        described = list(collector.describe())

        assert [f.name for f in described] == [i.name for i in catalog.CATALOG]
        assert all(not f.samples for f in described)

    def test_registers_on_registry(self, status_snapshot, now):
        """Test the collector can be registered and read back."""
        registry = CollectorRegistry()
        registry.register(ScrapeResultCollector(translate_status(status_snapshot, now)))

        assert registry.get_sample_value("pbx_calls_limit") == 50.0
        assert registry.get_sample_value("pbx_backup_age") == 3600.0
        assert registry.get_sample_value("pbx_backup_age_total") is None


class TestRenderSamples:
    """Test the text exposition output."""

    def test_renders_help_type_and_values(self, status_snapshot, now):
        """Test the text format carries metadata and values."""
        samples = translate_status(status_snapshot, now)
        samples += translate_trunk(TrunkEntry(name="Provider A", is_registered=True))

        text = render_samples(samples).decode()

        assert "# HELP pbx_calls_active Number of current active calls" in text
        assert "# TYPE pbx_calls_active gauge" in text
        assert "pbx_calls_active 10.0" in text
        assert "# TYPE pbx_backup_age untyped" in text
        assert "pbx_maintenance_remaining -1.0" in text
        assert "pbx_backup_age_total" not in text
        assert 'pbx_trunk_registered{name="Provider A"} 1.0' in text

    def test_empty_scrape_renders_empty_body(self):
        """Test a scrape with no samples produces no series."""
        assert render_samples([]) == b""
