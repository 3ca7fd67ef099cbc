"""
Bridge between scrape samples and the prometheus_client exposition machinery.
"""

from typing import Dict, Iterable, Iterator, List, Sequence

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily, Metric, UnknownMetricFamily

from pbx_exporter.telemetry.catalog import CATALOG
from pbx_exporter.telemetry.schemas import MetricIdentity, Sample, ValueKind


def new_metric_family(identity: MetricIdentity) -> Metric:
    """
    Create an empty metric family for one catalog identity.

    Counter-kind identities are exposed untyped: a prometheus_client counter family
    would rename the series to ``<name>_total``, and the exposed name must stay the
    catalog name.
    """
    labels = list(identity.label_names)
    if identity.kind is ValueKind.COUNTER:
        return UnknownMetricFamily(identity.name, identity.help, labels=labels)
    return GaugeMetricFamily(identity.name, identity.help, labels=labels)


def build_metric_families(
    samples: Iterable[Sample], catalog: Sequence[MetricIdentity] = CATALOG
) -> List[Metric]:
    """
    Group samples into metric families.

    Families come out in catalog order and only identities with at least one
    sample are included.
    """
    families: Dict[str, Metric] = {}
    for sample in samples:
        family = families.get(sample.identity.name)
        if family is None:
            family = families[sample.identity.name] = new_metric_family(sample.identity)
        family.add_metric(list(sample.label_values), sample.value)

    return [families[identity.name] for identity in catalog if identity.name in families]


class ScrapeResultCollector:
    """prometheus_client collector serving the samples of one finished scrape."""

    def __init__(self, samples: Sequence[Sample], catalog: Sequence[MetricIdentity] = CATALOG):
        self.samples = samples
        self.catalog = catalog

    def describe(self) -> Iterator[Metric]:
        for identity in self.catalog:
            yield new_metric_family(identity)

    def collect(self) -> Iterator[Metric]:
        yield from build_metric_families(self.samples, self.catalog)


def render_samples(
    samples: Sequence[Sample], catalog: Sequence[MetricIdentity] = CATALOG
) -> bytes:
    """Render samples in the Prometheus text exposition format."""
    registry = CollectorRegistry()
    registry.register(ScrapeResultCollector(samples, catalog))
    return generate_latest(registry)
