"""
iKuai API Client

Talks to the router's web management API: every call is a POST to
/Action/call carrying a func_name/action/param triple, answered with a
{"Result", "ErrMsg", "Data"} envelope. A session cookie is obtained from
/Action/login and kept by httpx.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import logging
from typing import Any, NamedTuple

import httpx
from pydantic import ValidationError

from ikuai_exporter.config import get_settings
from ikuai_exporter.models.monitor import LanDevice, MonitorInterface
from ikuai_exporter.models.system import SysStat
from ikuai_exporter.models.vlan import VlanRecord, WanInterface

logger = logging.getLogger(__name__)

SUCCESS = "Success"
NOT_LOGGED_IN = 10014


class IKuaiError(Exception):
    """Base error for upstream failures."""


class IKuaiConnectionError(IKuaiError):
    """Transport failure: connection, HTTP status or undecodable body."""


class IKuaiAPIError(IKuaiError):
    """The appliance answered but did not report success."""

    def __init__(self, result: Any, err_msg: str):
        self.result = result
        self.err_msg = err_msg
        super().__init__(f"iKuai returned {result}: {err_msg}")


class IKuaiPayloadError(IKuaiError):
    """The appliance reported success but Data did not match the expected shape."""


class VlanPage(NamedTuple):
    records: list[VlanRecord]
    total: int  # Reported for the whole uplink
    fetched: int  # Entries on this page, including skipped malformed ones


def _check(body: dict[str, Any]) -> dict[str, Any]:
    """Return Data of a successful envelope, raise otherwise."""
    if body.get("ErrMsg") != SUCCESS:
        raise IKuaiAPIError(body.get("Result"), str(body.get("ErrMsg", "")))
    data = body.get("Data") or {}
    if not isinstance(data, dict):
        raise IKuaiPayloadError(f"unexpected Data {type(data).__name__}")
    return data


def _parse(func_name: str, parse):
    """Run a model parser, turning validation failures into IKuaiPayloadError."""
    try:
        return parse()
    except (ValueError, TypeError) as e:  # ValidationError is a ValueError
        raise IKuaiPayloadError(f"{func_name}: {e}") from e


class IKuaiClient:
    """
    Async client for the iKuai web API

    One instance is shared by the refresh loop and all scrapes.

    Usage:
        async with IKuaiClient() as client:
            stat = await client.get_sys_stat()
    """

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        verify: bool | None = None,
        timeout: float = 30.0,
        debug: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.ikuai_url).rstrip('/')
        self.username = username or settings.ikuai_username
        self.password = password if password is not None else settings.ikuai_password
        self.verify = verify if verify is not None else not settings.skip_tls_verify
        self.timeout = timeout
        self.debug = debug if debug is not None else settings.debug
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._login_lock = asyncio.Lock()
        self._logged_in = False

    async def __aenter__(self) -> "IKuaiClient":
        await self.connect()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            verify=self.verify,
            transport=self._transport,
        )
        self._logged_in = False

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload and decode the envelope."""
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' or call connect().")

        if self.debug:
            logger.debug("POST %s %s", endpoint, payload.get("func_name", ""))
        try:
            response = await self._client.post(endpoint, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IKuaiConnectionError(f"{endpoint}: {e}") from e

        if self.debug:
            logger.debug("Response %s: %s", endpoint, body)
        if not isinstance(body, dict):
            raise IKuaiConnectionError(f"{endpoint}: unexpected body {type(body).__name__}")
        return body

    # ─────────────────────────────────────────────────────────────
    # Session
    # ─────────────────────────────────────────────────────────────

    async def login(self, force: bool = False) -> None:
        """Open a session; the cookie is stored on the httpx client."""
        async with self._login_lock:
            if self._logged_in and not force:
                return
            passwd = hashlib.md5(self.password.encode()).hexdigest()
            salted = base64.b64encode(f"salt_11{self.password}".encode()).decode()
            body = await self._post("/Action/login", {
                "username": self.username,
                "passwd": passwd,
                "pass": salted,
                "remember_password": "",
            })
            _check(body)
            self._logged_in = True
            logger.info("Logged in to iKuai at %s as %s", self.base_url, self.username)

    async def _call(self, func_name: str, param: dict[str, Any] | None = None, action: str = "show") -> dict[str, Any]:
        """Invoke an API function, logging in again once if the session expired."""
        payload = {"func_name": func_name, "action": action, "param": param or {}}

        await self.login()
        body = await self._post("/Action/call", payload)
        if body.get("Result") == NOT_LOGGED_IN:
            logger.info("iKuai session expired, logging in again")
            await self.login(force=True)
            body = await self._post("/Action/call", payload)
        return _check(body)

    # ─────────────────────────────────────────────────────────────
    # Monitoring endpoints
    # ─────────────────────────────────────────────────────────────

    async def get_sys_stat(self) -> SysStat:
        """Host-level CPU, memory, traffic and version figures"""
        data = await self._call("sysstat", {"TYPE": "verinfo,cpu,memory,stream,cputemp,uptime,online_user"})
        return _parse("sysstat", lambda: SysStat(**(data.get("sysstat") or {})))

    async def get_lan_devices(self) -> list[LanDevice]:
        """Terminals currently seen on the LAN"""
        data = await self._call("monitor_lanip", {
            "TYPE": "data,total",
            "ORDER_BY": "ip_addr_int",
            "ORDER": "",
            "limit": "0,1000",
        })
        return _parse("monitor_lanip", lambda: [LanDevice(**d) for d in data.get("data") or []])

    async def get_monitor_interface(self) -> MonitorInterface:
        """Per-interface traffic plus link health checks"""
        data = await self._call("monitor_iface", {"TYPE": "iface_check,iface_stream"})
        return _parse("monitor_iface", lambda: MonitorInterface(**data))

    # ─────────────────────────────────────────────────────────────
    # WAN / VLAN inventory
    # ─────────────────────────────────────────────────────────────

    async def get_wan_list(self) -> list[WanInterface]:
        """WAN uplinks configured on the appliance"""
        data = await self._call("wan", {"TYPE": "snapshoot"})
        return _parse("wan", lambda: [WanInterface(**w) for w in data.get("snapshoot_wan") or []])

    async def get_vlan_page(self, interface: str, offset: int, limit: int) -> VlanPage:
        """
        One page of VLAN sub-interfaces hosted on a WAN uplink.

        Malformed entries are logged and left out of ``records`` but still
        counted in ``fetched``, so pagination moves past them.
        """
        data = await self._call("wan", {
            "TYPE": "vlan_data,vlan_total",
            "interface": interface,
            "limit": f"{offset},{limit}",
            "ORDER_BY": "vlan_name",
            "ORDER": "asc",
        })
        entries = data.get("vlan_data") or []
        total = _parse("wan", lambda: int(data.get("vlan_total") or 0))
        if not isinstance(entries, list):
            raise IKuaiPayloadError(f"wan: unexpected vlan_data {type(entries).__name__}")

        records: list[VlanRecord] = []
        for entry in entries:
            try:
                records.append(VlanRecord(**entry))
            except (ValidationError, TypeError) as e:
                logger.warning("Skipping malformed VLAN entry on %s: %s", interface, e)
        return VlanPage(records, total, len(entries))
