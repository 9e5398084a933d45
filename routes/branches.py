"""
Branch API routes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.branch import BranchCreate, BranchUpdate, BranchResponse
from services.branch_service import get_branch_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/branches", tags=["Branches"])


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


@router.get("", response_model=list[BranchResponse])
async def list_branches():
    """
    Get all branches.

    Small table, no pagination needed.
    """
    try:
        service = await get_branch_service()
        return await service.get_all()
    except Exception as e:
        return handle_error(e)


@router.get("/{branch_id}", response_model=BranchResponse)
async def get_branch(branch_id: str):
    """
    Get a single branch by ID.

    Raises:
        404: Branch not found
    """
    try:
        service = await get_branch_service()
        return await service.get_by_id(branch_id)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=BranchResponse, status_code=201)
async def create_branch(data: BranchCreate):
    """
    Create a branch.

    Raises:
        422: manager_id is not a manager
    """
    try:
        service = await get_branch_service()
        return await service.create(data)
    except Exception as e:
        return handle_error(e)


@router.patch("/{branch_id}", response_model=BranchResponse)
async def update_branch(branch_id: str, data: BranchUpdate):
    """
    Update name, region or manager of a branch.

    Raises:
        404: Branch not found
        422: manager_id is not a manager
    """
    try:
        service = await get_branch_service()
        return await service.update(branch_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/{branch_id}", status_code=204)
async def delete_branch(branch_id: str):
    try:
        service = await get_branch_service()
        await service.delete(branch_id)
        return None
    except Exception as e:
        return handle_error(e)
