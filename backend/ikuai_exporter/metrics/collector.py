"""
Metrics Collector

Joins live iKuai data with the VLAN cache on every scrape.
The system statistics call decides whether the appliance is reachable;
the LAN device and interface sections are best effort.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ikuai_exporter.cache import VlanCache
from ikuai_exporter.models.monitor import IfaceCheck, LanDevice, MonitorInterface
from ikuai_exporter.models.system import SysStat
from ikuai_exporter.polling.ikuai import IKuaiClient, IKuaiError

logger = logging.getLogger(__name__)

HOST_ID = "host"
STATUS_LABELS = ("id", "adsl_no")


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    help: str
    label_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class Observation:
    name: str
    labels: dict[str, str] = field(default_factory=dict)
    value: float = 0.0

    def __post_init__(self):
        # Each observation owns its labels
        object.__setattr__(self, "labels", dict(self.labels))

    def __hash__(self) -> int:
        return hash((self.name, tuple(sorted(self.labels.items())), self.value))


DESCRIPTORS: tuple[MetricDescriptor, ...] = (
    MetricDescriptor("ikuai_version", "iKuai version info", ("version", "arch", "verstring")),
    MetricDescriptor("ikuai_cpu_usage_ratio", "iKuai CPU usage ratio per core", ("id",)),
    MetricDescriptor("ikuai_cpu_temperature", "iKuai CPU temperature"),
    MetricDescriptor("ikuai_memory_size_bytes", "Total memory in bytes"),
    MetricDescriptor("ikuai_memory_usage_bytes", "Used memory in bytes"),
    MetricDescriptor("ikuai_memory_cached_bytes", "Cached memory in bytes"),
    MetricDescriptor("ikuai_memory_buffers_bytes", "Buffer memory in bytes"),
    MetricDescriptor(
        "ikuai_device_info", "LAN device info",
        ("id", "mac", "hostname", "ip_addr", "comment", "adsl_no"),
    ),
    MetricDescriptor("ikuai_device_count", "Online LAN device count"),
    MetricDescriptor(
        "ikuai_iface_info", "Interface info",
        ("id", "interface", "comment", "adsl_no", "internet", "parent_interface", "ip_addr"),
    ),
    MetricDescriptor("ikuai_up", "Host or link is up", STATUS_LABELS),
    MetricDescriptor("ikuai_uptime", "Host or link uptime in seconds", STATUS_LABELS),
    MetricDescriptor("ikuai_network_send_bytes", "Total bytes sent", STATUS_LABELS),
    MetricDescriptor("ikuai_network_recv_bytes", "Total bytes received", STATUS_LABELS),
    MetricDescriptor("ikuai_network_send_kbytes_per_second", "Upload rate", STATUS_LABELS),
    MetricDescriptor("ikuai_network_recv_kbytes_per_second", "Download rate", STATUS_LABELS),
    MetricDescriptor("ikuai_network_conn_count", "Connection count", STATUS_LABELS),
)


# ─────────────────────────────────────────────────────────────────────────────
# Field derivation
# ─────────────────────────────────────────────────────────────────────────────


def adsl_name_for_ip(ip_addr: str) -> str:
    """
    Name of the VLAN that serves a LAN address.

    The network prefix (every octet but the last) is concatenated:
    10.0.0.5 -> adsl1000.
    """
    prefix = ip_addr.rpartition(".")[0]
    return f"adsl{prefix.replace('.', '')}"


def parse_cpu_ratio(value: str) -> float:
    """'12.5%' -> 0.125; unparseable values count as idle."""
    try:
        return float(value.strip().rstrip("%")) / 100
    except ValueError:
        return 0.0


def parse_int(value: str | None) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def dedupe_devices(devices: list[LanDevice]) -> dict[str, LanDevice]:
    """Index devices by IP, keeping the first occurrence."""
    by_ip: dict[str, LanDevice] = {}
    for device in devices:
        by_ip.setdefault(device.ip_addr, device)
    return by_ip


# ─────────────────────────────────────────────────────────────────────────────
# Collector
# ─────────────────────────────────────────────────────────────────────────────


class MetricsCollector:
    """Produces one batch of gauge observations per scrape."""

    def __init__(
        self,
        client: IKuaiClient,
        cache: VlanCache,
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._cache = cache
        self._clock = clock

    def describe(self) -> list[MetricDescriptor]:
        return list(DESCRIPTORS)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Cached VLAN records, keyed by name."""
        return {name: record.model_dump() for name, record in self._cache.read_all().items()}

    async def collect(self) -> list[Observation]:
        """
        Collect every metric for one scrape.

        Never raises: an unreachable appliance or any internal failure
        yields a lone ``ikuai_up{id="host"} 0``.
        """
        try:
            return await self._collect()
        except Exception:
            logger.exception("Failed to collect iKuai metrics")
            return [_host_down()]

    async def _collect(self) -> list[Observation]:
        try:
            stat = await self._client.get_sys_stat()
        except IKuaiError as e:
            logger.error("iKuai sysstat failed: %s", e)
            return [_host_down()]

        out: list[Observation] = []
        self._system_metrics(stat, out)

        devices, monitor = await asyncio.gather(
            self._client.get_lan_devices(),
            self._client.get_monitor_interface(),
            return_exceptions=True,
        )

        if _section_ok("LAN devices", devices):
            self._device_metrics(devices, out)

        out.append(Observation("ikuai_device_count", {}, stat.online_user.count))

        if _section_ok("interface monitor", monitor):
            self._interface_metrics(monitor, out)

        self._host_metrics(stat, out)
        out.append(Observation("ikuai_up", _status_labels(HOST_ID), 1))
        return out

    def _system_metrics(self, stat: SysStat, out: list[Observation]) -> None:
        ver = stat.verinfo
        out.append(Observation(
            "ikuai_version",
            {"version": ver.version, "arch": ver.arch, "verstring": ver.verstring},
            1,
        ))

        if stat.cputemp:
            out.append(Observation("ikuai_cpu_temperature", {}, stat.cputemp[0]))

        for idx, usage in enumerate(stat.cpu):
            out.append(Observation("ikuai_cpu_usage_ratio", {"id": f"core/{idx}"}, parse_cpu_ratio(usage)))

        memory = stat.memory
        out.append(Observation("ikuai_memory_size_bytes", {}, memory.total))
        out.append(Observation("ikuai_memory_usage_bytes", {}, memory.total - memory.available))
        out.append(Observation("ikuai_memory_cached_bytes", {}, memory.cached))
        out.append(Observation("ikuai_memory_buffers_bytes", {}, memory.buffers))

    def _device_metrics(self, devices: list[LanDevice], out: list[Observation]) -> None:
        for ip_addr, device in dedupe_devices(devices).items():
            if not ip_addr:
                continue

            device_id = f"device/{ip_addr}"
            adsl_no = self._cache.username(adsl_name_for_ip(ip_addr))

            out.append(Observation("ikuai_device_info", {
                "id": device_id,
                "mac": device.mac,
                "hostname": device.hostname,
                "ip_addr": device.ip_addr,
                "comment": device.comment,
                "adsl_no": adsl_no,
            }, 1))
            _traffic(out, _status_labels(device_id, adsl_no),
                     device.total_up, device.total_down, device.upload, device.download, device.connect_num)

    def _interface_metrics(self, monitor: MonitorInterface, out: list[Observation]) -> None:
        checks: dict[str, IfaceCheck] = {check.interface: check for check in monitor.iface_check}
        now = self._clock()

        for iface in monitor.iface_stream:
            iface_id = f"iface/{iface.interface}"
            internet = ""
            parent = ""
            up = 1
            uptime = 0

            check = checks.get(iface.interface)
            if check:
                internet = check.internet
                parent = check.parent_interface
                if check.result != "success":
                    up = 0
                else:
                    try:
                        uptime = int(now) - int(check.updatetime.strip())
                    except ValueError:
                        uptime = 0

            # Interfaces are named after their VLAN, no address derivation
            adsl_no = self._cache.username(iface.interface)
            labels = _status_labels(iface_id, adsl_no)

            out.append(Observation("ikuai_iface_info", {
                "id": iface_id,
                "interface": iface.interface,
                "comment": iface.comment,
                "adsl_no": adsl_no,
                "internet": internet,
                "parent_interface": parent,
                "ip_addr": iface.ip_addr,
            }, 1))
            out.append(Observation("ikuai_up", labels, up))
            out.append(Observation("ikuai_uptime", labels, uptime))
            _traffic(out, labels, iface.total_up, iface.total_down, iface.upload, iface.download,
                     parse_int(iface.connect_num))

    def _host_metrics(self, stat: SysStat, out: list[Observation]) -> None:
        labels = _status_labels(HOST_ID)
        stream = stat.stream
        out.append(Observation("ikuai_uptime", labels, stat.uptime))
        _traffic(out, labels, stream.total_up, stream.total_down, stream.upload, stream.download, stream.connect_num)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _status_labels(metric_id: str, adsl_no: str = "") -> dict[str, str]:
    return {"id": metric_id, "adsl_no": adsl_no}


def _host_down() -> Observation:
    return Observation("ikuai_up", _status_labels(HOST_ID), 0)


def _section_ok(section: str, result: Any) -> bool:
    """Log and skip an upstream failure; anything else is unexpected."""
    if isinstance(result, IKuaiError):
        logger.warning("iKuai %s failed, skipping: %s", section, result)
        return False
    if isinstance(result, BaseException):
        raise result
    return True


def _traffic(
    out: list[Observation],
    labels: dict[str, str],
    total_up: int,
    total_down: int,
    upload: int,
    download: int,
    connect_num: int,
) -> None:
    out.append(Observation("ikuai_network_send_bytes", labels, total_up))
    out.append(Observation("ikuai_network_recv_bytes", labels, total_down))
    out.append(Observation("ikuai_network_send_kbytes_per_second", labels, upload))
    out.append(Observation("ikuai_network_recv_kbytes_per_second", labels, download))
    out.append(Observation("ikuai_network_conn_count", labels, connect_num))
