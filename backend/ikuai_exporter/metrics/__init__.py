"""Scrape-time metric collection and rendering."""

from ikuai_exporter.metrics.collector import (
    DESCRIPTORS,
    MetricDescriptor,
    MetricsCollector,
    Observation,
    adsl_name_for_ip,
)
from ikuai_exporter.metrics.exposition import render

__all__ = [
    "DESCRIPTORS",
    "MetricDescriptor",
    "MetricsCollector",
    "Observation",
    "adsl_name_for_ip",
    "render",
]
