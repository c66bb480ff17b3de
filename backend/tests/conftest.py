"""Shared fixtures for the ikuai_exporter test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ikuai_exporter.cache import VlanCache
from ikuai_exporter.models import IfaceCheck, IfaceStream, LanDevice, MonitorInterface, SysStat, VlanRecord
from ikuai_exporter.polling.ikuai import IKuaiClient, VlanPage

# ── upstream payloads ─────────────────────────────────────────────────


@pytest.fixture()
def sys_stat():
    """A healthy two-core appliance."""
    return SysStat(**{
        "verinfo": {"version": "3.7.5", "arch": "x86", "verstring": "3.7.5 x64 Build202306121430"},
        "cpu": ["12.50%", "3%"],
        "cputemp": [48],
        "memory": {"total": 8000, "available": 3000, "cached": 1500, "buffers": 200},
        "stream": {"connect_num": 420, "upload": 1024, "download": 4096, "total_up": 10, "total_down": 20},
        "online_user": {"count": 7},
        "uptime": 86400,
    })


@pytest.fixture()
def lan_devices():
    return [
        LanDevice(ip_addr="10.0.0.5", mac="aa:bb", hostname="first", comment="desk",
                  upload=1, download=2, total_up=3, total_down=4, connect_num=5),
        LanDevice(ip_addr="10.0.0.5", mac="cc:dd", hostname="second"),
        LanDevice(ip_addr="", mac="ee:ff", hostname="no-ip"),
    ]


@pytest.fixture()
def monitor():
    return MonitorInterface(
        iface_stream=[
            IfaceStream(interface="adsl1000", comment="line", ip_addr="100.64.0.2",
                        upload=7, download=8, total_up=9, total_down=10, connect_num="33"),
        ],
        iface_check=[
            IfaceCheck(interface="adsl1000", parent_interface="wan1", internet="1", result="success",
                       updatetime="1700000000"),
        ],
    )


@pytest.fixture()
def cache():
    cache = VlanCache()
    cache.write("adsl1000", VlanRecord(vlan_name="adsl1000", username="acct-1000", interface="wan1"))
    return cache


# ── client mock ───────────────────────────────────────────────────────


@pytest.fixture()
def mock_client(sys_stat, lan_devices, monitor):
    """AsyncMock of IKuaiClient answering with the sample payloads."""
    client = AsyncMock(spec=IKuaiClient)
    client.get_sys_stat.return_value = sys_stat
    client.get_lan_devices.return_value = lan_devices
    client.get_monitor_interface.return_value = monitor
    client.get_wan_list.return_value = []
    client.get_vlan_page.return_value = VlanPage([], 0, 0)
    return client
