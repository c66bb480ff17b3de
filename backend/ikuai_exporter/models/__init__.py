# Pydantic models
from .vlan import VlanRecord, WanInterface
from .system import Memory, OnlineUser, Stream, SysStat, VerInfo
from .monitor import IfaceCheck, IfaceStream, LanDevice, MonitorInterface

__all__ = [
    "VlanRecord",
    "WanInterface",
    "Memory",
    "OnlineUser",
    "Stream",
    "SysStat",
    "VerInfo",
    "IfaceCheck",
    "IfaceStream",
    "LanDevice",
    "MonitorInterface",
]
