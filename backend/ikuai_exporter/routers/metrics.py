"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST

from ..metrics.collector import MetricsCollector
from ..metrics.exposition import render
from .deps import get_collector

router = APIRouter()


@router.get("/metrics")
async def scrape(collector: MetricsCollector = Depends(get_collector)):
    """Collect from iKuai and render in Prometheus text format."""
    observations = await collector.collect()
    return Response(content=render(collector.describe(), observations), media_type=CONTENT_TYPE_LATEST)
