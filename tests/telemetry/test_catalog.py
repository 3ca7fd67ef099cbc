"""
Unit tests for the metric catalog.
"""

import pytest
from pydantic import ValidationError

from pbx_exporter.telemetry import catalog
from pbx_exporter.telemetry.catalog import CATALOG, describe_catalog
from pbx_exporter.telemetry.schemas import ValueKind


class TestCatalog:
    """Test the fixed catalog of metric identities."""

    def test_catalog_has_eleven_identities(self):
        """Test the catalog advertises exactly eleven metrics."""
        assert len(describe_catalog()) == 11

    def test_names_are_prefixed_and_unique(self):
        """Test every name carries the pbx_ prefix and appears once."""
        names = [identity.name for identity in CATALOG]
        assert all(name.startswith("pbx_") for name in names)
        assert len(set(names)) == len(names)

    def test_declared_order_and_shapes(self):
        """Test names, label schemas and value kinds in declared order."""
        expected = [
            ("pbx_blacklist_size", (), ValueKind.GAUGE),
            ("pbx_calls_active", (), ValueKind.GAUGE),
            ("pbx_calls_limit", (), ValueKind.GAUGE),
            ("pbx_extensions_total", (), ValueKind.GAUGE),
            ("pbx_extensions_registered", (), ValueKind.GAUGE),
            ("pbx_backup_age", (), ValueKind.COUNTER),
            ("pbx_maintenance_remaining", (), ValueKind.COUNTER),
            ("pbx_service_status", ("name",), ValueKind.GAUGE),
            ("pbx_service_cpu", ("name",), ValueKind.GAUGE),
            ("pbx_service_memory", ("name",), ValueKind.GAUGE),
            ("pbx_trunk_registered", ("name",), ValueKind.GAUGE),
        ]

        actual = [(i.name, i.label_names, i.kind) for i in describe_catalog()]

        assert actual == expected

    def test_every_identity_has_help(self):
        """Test every identity documents itself."""
        assert all(identity.help for identity in CATALOG)

    def test_describe_returns_same_catalog_every_time(self):
        """Test enumeration is stable between calls."""
        assert describe_catalog() is describe_catalog()
        assert describe_catalog() == CATALOG

    def test_identities_are_immutable(self):
        """Test identities cannot be modified after creation."""
        with pytest.raises(ValidationError):
            catalog.CALLS_ACTIVE.name = "pbx_other"

    def test_named_constants_are_catalog_members(self):
        """Test the module constants are the catalog entries."""
        assert catalog.BACKUP_AGE in CATALOG
        assert catalog.TRUNK_REGISTERED is CATALOG[-1]
