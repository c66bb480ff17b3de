"""Request-scoped access to the components stored on the application."""

from fastapi import Request

from ..cache import VlanCache
from ..metrics.collector import MetricsCollector


def get_cache(request: Request) -> VlanCache:
    return request.app.state.cache


def get_collector(request: Request) -> MetricsCollector:
    return request.app.state.collector
