"""
Training catalog API routes.

Paths, categories and materials. The catalog listing returns paths with
nested categories (sorted by name) and their materials.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.catalog import (
    PathCreate,
    PathUpdate,
    PathResponse,
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    MaterialCreate,
    MaterialUpdate,
    MaterialResponse,
)
from services.path_service import get_path_service
from services.category_service import get_category_service
from services.material_service import get_material_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# PATHS
# ===================

@router.get("/paths", response_model=list[PathResponse])
async def list_catalog():
    """List all paths with their categories and materials."""
    try:
        service = await get_path_service()
        return await service.get_catalog()
    except Exception as e:
        return handle_error(e)


@router.post("/paths", response_model=PathResponse, status_code=201)
async def create_path(data: PathCreate):
    """Create a training path."""
    try:
        service = await get_path_service()
        return await service.create(data)
    except Exception as e:
        return handle_error(e)


@router.patch("/paths/{path_id}", response_model=PathResponse)
async def rename_path(path_id: str, data: PathUpdate):
    """
    Rename a training path.

    Raises:
        404: Path not found
    """
    try:
        service = await get_path_service()
        return await service.rename(path_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/paths/{path_id}", status_code=204)
async def delete_path(path_id: str):
    """
    Delete a training path with all its categories and materials.

    Raises:
        404: Path not found
    """
    try:
        service = await get_path_service()
        await service.delete(path_id)
        return None
    except Exception as e:
        return handle_error(e)


# ===================
# CATEGORIES
# ===================

@router.post("/paths/{path_id}/categories", response_model=CategoryResponse, status_code=201)
async def create_category(path_id: str, data: CategoryCreate):
    """
    Add a category to a path.

    Raises:
        404: Path not found
    """
    try:
        paths = await get_path_service()
        await paths.get_by_id(path_id)

        service = await get_category_service()
        return await service.create(path_id, data)
    except Exception as e:
        return handle_error(e)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: str, data: CategoryUpdate):
    """Rename or edit a category."""
    try:
        service = await get_category_service()
        return await service.update(category_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/categories/{category_id}", status_code=204)
async def delete_category(category_id: str):
    """Delete a category and its materials."""
    try:
        service = await get_category_service()
        await service.delete(category_id)
        return None
    except Exception as e:
        return handle_error(e)


# ===================
# MATERIALS
# ===================

@router.get("/categories/{category_id}/materials", response_model=list[MaterialResponse])
async def list_materials(category_id: str):
    try:
        service = await get_material_service()
        return await service.get_by_category(category_id)
    except Exception as e:
        return handle_error(e)


@router.post("/categories/{category_id}/materials", response_model=MaterialResponse, status_code=201)
async def create_material(category_id: str, data: MaterialCreate):
    """
    Attach a material to a category.

    Raises:
        404: Category not found
    """
    try:
        categories = await get_category_service()
        await categories.get_by_id(category_id)

        service = await get_material_service()
        return await service.create(category_id, data)
    except Exception as e:
        return handle_error(e)


@router.patch("/materials/{material_id}", response_model=MaterialResponse)
async def update_material(material_id: str, data: MaterialUpdate):
    try:
        service = await get_material_service()
        return await service.update(material_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/materials/{material_id}", status_code=204)
async def delete_material(material_id: str):
    try:
        service = await get_material_service()
        await service.delete(material_id)
        return None
    except Exception as e:
        return handle_error(e)
