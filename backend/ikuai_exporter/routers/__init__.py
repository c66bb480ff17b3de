# API routers
from .metrics import router as metrics_router
from .vlans import router as vlans_router

__all__ = ["metrics_router", "vlans_router"]
