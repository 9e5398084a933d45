"""
User API routes.

Creating a user goes through the identity provider; the other routes
work on the profile row.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.user import UserRole, UserCreate, UserUpdate, UserResponse
from services.user_service import get_user_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


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


@router.get("", response_model=list[UserResponse])
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    branch_id: Optional[str] = Query(None, description="Filter by branch"),
):
    """List user profiles."""
    try:
        service = await get_user_service()
        return await service.get_all(role=role, branch_id=branch_id)
    except Exception as e:
        return handle_error(e)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str):
    """
    Get a single user profile.

    Raises:
        404: User not found
    """
    try:
        service = await get_user_service()
        return await service.get_by_id(user_id)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate):
    """
    Create a user.

    Staff and managers need a branch_id; admins must not have one.

    Raises:
        404: Branch not found
        422: Branch does not fit the role
        503: Identity provider rejected the user
    """
    try:
        service = await get_user_service()
        return await service.create(data)
    except Exception as e:
        return handle_error(e)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, data: UserUpdate):
    """
    Update name, role or branch.

    Raises:
        404: User not found
        422: Branch does not fit the role
    """
    try:
        service = await get_user_service()
        return await service.update(user_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str):
    try:
        service = await get_user_service()
        await service.delete(user_id)
        return None
    except Exception as e:
        return handle_error(e)
