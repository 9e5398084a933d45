"""
Training progress API routes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.progress import (
    ProgressToggle,
    ProgressToggleResponse,
    UserProgress,
    BranchProgress,
)
from services.progress_service import get_progress_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/progress", tags=["Progress"])


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


@router.post("/toggle", response_model=ProgressToggleResponse)
async def toggle_completion(data: ProgressToggle):
    """Mark a category complete for a user, or undo it."""
    try:
        service = await get_progress_service()
        return await service.toggle(data)
    except Exception as e:
        return handle_error(e)


@router.get("/users/{user_id}", response_model=UserProgress)
async def get_user_progress(user_id: str):
    """Completed categories and percentage for one user."""
    try:
        service = await get_progress_service()
        return await service.get_user_progress(user_id)
    except Exception as e:
        return handle_error(e)


@router.get("/branches/{branch_id}", response_model=BranchProgress)
async def get_branch_progress(branch_id: str):
    """Aggregate completion over the staff of a branch."""
    try:
        service = await get_progress_service()
        return await service.get_branch_progress(branch_id)
    except Exception as e:
        return handle_error(e)
