"""iKuai API client and the VLAN refresh loop."""

from ikuai_exporter.polling.ikuai import (
    IKuaiAPIError,
    IKuaiClient,
    IKuaiConnectionError,
    IKuaiError,
)
from ikuai_exporter.polling.refresh import VlanRefresher
from ikuai_exporter.polling.scheduler import RefreshScheduler

__all__ = [
    # Client
    "IKuaiClient",
    "IKuaiError",
    "IKuaiAPIError",
    "IKuaiConnectionError",
    # Refresh
    "VlanRefresher",
    "RefreshScheduler",
]
