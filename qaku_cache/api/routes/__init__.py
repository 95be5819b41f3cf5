"""API routes."""

from .health import create_health_router
from .proxy import create_proxy_router

__all__ = ["create_health_router", "create_proxy_router"]
