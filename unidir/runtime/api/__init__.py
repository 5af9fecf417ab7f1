"""Runtime API endpoints."""

from unidir.runtime.api.catalog import router as catalog_router
from unidir.runtime.api.entities import router as entities_router
from unidir.runtime.api.health import router as health_router
from unidir.runtime.api.sessions import router as sessions_router

__all__ = [
    "catalog_router",
    "entities_router",
    "health_router",
    "sessions_router",
]
