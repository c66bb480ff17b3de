"""Tests for the HTTP surface."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from prometheus_client.parser import text_string_to_metric_families

from ikuai_exporter.config import AppConfig, RefreshConfig
from ikuai_exporter.models import VlanRecord, WanInterface
from ikuai_exporter.main import create_app
from ikuai_exporter.polling.ikuai import IKuaiConnectionError, VlanPage


@pytest.fixture()
def config():
    return AppConfig(refresh=RefreshConfig(initial_delay_seconds=3600))


@pytest.fixture()
def app(config, mock_client):
    app = create_app(config=config, client=mock_client)
    app.state.cache.write("adsl1000", VlanRecord(vlan_name="adsl1000", username="acct-1000", interface="wan1"))
    return app


def _samples(text: str) -> list[tuple[str, dict[str, str], float]]:
    return [
        (s.name, s.labels, s.value)
        for family in text_string_to_metric_families(text)
        for s in family.samples
    ]


def test_metrics_endpoint(app):
    response = TestClient(app).get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    samples = _samples(response.text)
    assert ("ikuai_up", {"id": "host", "adsl_no": ""}, 1.0) in samples
    assert ("ikuai_network_conn_count", {"id": "device/10.0.0.5", "adsl_no": "acct-1000"}, 5.0) in samples


def test_metrics_endpoint_when_appliance_down(app, mock_client):
    mock_client.get_sys_stat.side_effect = IKuaiConnectionError("refused")

    response = TestClient(app).get("/metrics")

    assert response.status_code == 200
    assert _samples(response.text) == [("ikuai_up", {"id": "host", "adsl_no": ""}, 0.0)]


def test_all_vlan(app):
    response = TestClient(app).get("/allVlan")

    assert response.status_code == 200
    assert response.json()["adsl1000"]["username"] == "acct-1000"


def test_single_vlan(app):
    client = TestClient(app)

    assert client.get("/api/vlans/adsl1000").json()["interface"] == "wan1"
    assert client.get("/api/vlans/missing").status_code == 404


def test_lifespan_warms_up_and_schedules_refresh(config, mock_client):
    mock_client.get_wan_list.return_value = [WanInterface(interface="wan1")]
    mock_client.get_vlan_page.return_value = VlanPage([VlanRecord(vlan_name="adsl7", username="u7")], 1, 1)
    app = create_app(config=config, client=mock_client)

    with TestClient(app) as client:
        health = client.get("/health").json()

    assert health["cached_vlans"] == 1
    assert health["refresh_running"] is False
    mock_client.connect.assert_awaited_once()
    mock_client.close.assert_awaited_once()


def test_failed_warm_up_does_not_prevent_startup(config, mock_client):
    mock_client.get_wan_list.side_effect = RuntimeError("boom")
    app = create_app(config=config, client=mock_client)

    with TestClient(app) as client:
        assert client.get("/health").json()["cached_vlans"] == 0
