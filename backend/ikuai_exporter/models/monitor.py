"""Live monitor models: LAN devices and interface streams/health checks."""

from pydantic import BaseModel, ConfigDict


class LanDevice(BaseModel):
    """Terminal seen on the LAN side."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    ip_addr: str = ""
    mac: str = ""
    hostname: str = ""
    comment: str = ""
    upload: int = 0
    download: int = 0
    total_up: int = 0
    total_down: int = 0
    connect_num: int = 0


class IfaceStream(BaseModel):
    """Traffic counters for one interface."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    interface: str
    comment: str = ""
    ip_addr: str = ""
    upload: int = 0
    download: int = 0
    total_up: int = 0
    total_down: int = 0
    connect_num: str = ""  # Reported as a string, may be empty


class IfaceCheck(BaseModel):
    """Health check result for one interface."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    interface: str
    parent_interface: str = ""
    internet: str = ""
    ip_addr: str = ""
    result: str = ""  # "success" when the link is up
    updatetime: str = ""  # Unix seconds as a decimal string
    errmsg: str = ""


class MonitorInterface(BaseModel):
    model_config = ConfigDict(extra="ignore")

    iface_check: list[IfaceCheck] = []
    iface_stream: list[IfaceStream] = []
