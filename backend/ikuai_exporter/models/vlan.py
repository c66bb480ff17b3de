"""VLAN and WAN inventory models."""

from pydantic import BaseModel, ConfigDict


class VlanRecord(BaseModel):
    """VLAN sub-interface hosted on a WAN uplink.

    Records are replaced wholesale on every refresh, never mutated.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    vlan_name: str
    username: str = ""  # PPPoE account, exported as adsl_no
    interface: str = ""  # Parent WAN interface
    vlan_id: str = ""
    id: int | None = None
    mac: str = ""
    ip_mask: str = ""
    gateway: str = ""
    comment: str = ""
    enabled: str = ""


class WanInterface(BaseModel):
    """WAN uplink from the interface snapshot."""

    model_config = ConfigDict(extra="ignore")

    interface: str
    comment: str = ""
    ip_addr: str = ""
