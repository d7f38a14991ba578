"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from classtree.api.classes import router as classes_router
from classtree.api.health import router as health_router
from classtree.api.products import router as products_router
from classtree.api.registry import router as registry_router

__all__ = [
    "classes_router",
    "health_router",
    "products_router",
    "registry_router",
]
