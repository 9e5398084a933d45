"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.catalog import router as catalog_router
from routes.branches import router as branches_router
from routes.users import router as users_router
from routes.progress import router as progress_router
from routes.imports import router as imports_router

__all__ = [
    "catalog_router",
    "branches_router",
    "users_router",
    "progress_router",
    "imports_router",
]
