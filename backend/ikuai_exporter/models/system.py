"""Host-level statistics models (sysstat)."""

from pydantic import BaseModel, ConfigDict


class VerInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    version: str = ""
    arch: str = ""
    verstring: str = ""
    modelname: str = ""


class Memory(BaseModel):
    """Memory figures in bytes."""

    model_config = ConfigDict(extra="ignore")

    total: int = 0
    available: int = 0
    free: int = 0
    cached: int = 0
    buffers: int = 0


class Stream(BaseModel):
    """Aggregate traffic counters for the whole appliance."""

    model_config = ConfigDict(extra="ignore")

    connect_num: int = 0
    upload: int = 0  # KB/s
    download: int = 0  # KB/s
    total_up: int = 0
    total_down: int = 0


class OnlineUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    count_wired: int = 0
    count_wireless: int = 0


class SysStat(BaseModel):
    """Appliance statistics snapshot."""

    model_config = ConfigDict(extra="ignore")

    verinfo: VerInfo = VerInfo()
    cpu: list[str] = []  # Per-core usage, e.g. "3.25%"
    cputemp: list[int] = []
    memory: Memory = Memory()
    stream: Stream = Stream()
    online_user: OnlineUser = OnlineUser()
    uptime: int = 0  # seconds
