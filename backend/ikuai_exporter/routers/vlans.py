"""VLAN cache introspection routes."""

from fastapi import APIRouter, Depends, HTTPException

from ..cache import VlanCache
from ..metrics.collector import MetricsCollector
from ..models.vlan import VlanRecord
from .deps import get_cache, get_collector

router = APIRouter()


@router.get("/allVlan")
async def all_vlans(collector: MetricsCollector = Depends(get_collector)):
    """Every cached VLAN record, keyed by VLAN name."""
    return collector.snapshot()


@router.get("/api/vlans/{name}", response_model=VlanRecord)
async def get_vlan(name: str, cache: VlanCache = Depends(get_cache)):
    """Get one cached VLAN record."""
    record, found = cache.read(name)

    if not found:
        raise HTTPException(status_code=404, detail=f"VLAN '{name}' not cached")

    return record
