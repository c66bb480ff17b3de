"""Prometheus text rendering of one scrape's observations."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily

from ikuai_exporter.metrics.collector import MetricDescriptor, Observation


class ScrapeBatch:
    """prometheus_client collector over an already collected batch."""

    def __init__(self, descriptors: Iterable[MetricDescriptor], observations: Iterable[Observation]):
        self._descriptors = list(descriptors)
        self._observations = list(observations)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        families: dict[str, tuple[GaugeMetricFamily, tuple[str, ...]]] = {
            d.name: (GaugeMetricFamily(d.name, d.help, labels=list(d.label_names)), d.label_names)
            for d in self._descriptors
        }
        for obs in self._observations:
            family, label_names = families[obs.name]
            family.add_metric([obs.labels.get(name, "") for name in label_names], obs.value)

        for family, _ in families.values():
            if family.samples:
                yield family


def render(descriptors: Iterable[MetricDescriptor], observations: Iterable[Observation]) -> bytes:
    """Text exposition for a batch, using a registry private to this scrape."""
    registry = CollectorRegistry(auto_describe=False)
    registry.register(ScrapeBatch(descriptors, observations))
    return generate_latest(registry)
