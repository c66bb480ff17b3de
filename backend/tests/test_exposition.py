"""Tests for Prometheus text rendering."""

from __future__ import annotations

from prometheus_client.parser import text_string_to_metric_families

from ikuai_exporter.metrics.collector import DESCRIPTORS, Observation
from ikuai_exporter.metrics.exposition import render


def _samples(text: bytes) -> list[tuple[str, dict[str, str], float]]:
    return [
        (s.name, s.labels, s.value)
        for family in text_string_to_metric_families(text.decode())
        for s in family.samples
    ]


def test_renders_gauge_with_labels():
    text = render(DESCRIPTORS, [
        Observation("ikuai_up", {"adsl_no": "acct", "id": "iface/wan1"}, 1),
    ])

    assert "# TYPE ikuai_up gauge" in text.decode()
    assert _samples(text) == [("ikuai_up", {"id": "iface/wan1", "adsl_no": "acct"}, 1.0)]


def test_families_without_samples_are_omitted():
    text = render(DESCRIPTORS, [Observation("ikuai_up", {"id": "host", "adsl_no": ""}, 0)])

    assert _samples(text) == [("ikuai_up", {"id": "host", "adsl_no": ""}, 0.0)]
    assert "ikuai_version" not in text.decode()


def test_unlabelled_gauge():
    text = render(DESCRIPTORS, [Observation("ikuai_memory_size_bytes", {}, 8000)])

    assert _samples(text) == [("ikuai_memory_size_bytes", {}, 8000.0)]


def test_missing_label_rendered_empty():
    text = render(DESCRIPTORS, [Observation("ikuai_uptime", {"id": "host"}, 5)])

    assert _samples(text) == [("ikuai_uptime", {"id": "host", "adsl_no": ""}, 5.0)]
