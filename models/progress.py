"""
Training progress schemas.
"""

from pydantic import Field

from models.base import BaseSchema


class ProgressToggle(BaseSchema):
    """Flip completion of one category for one user."""

    user_id: str
    path_id: str
    category_id: str


class ProgressToggleResponse(BaseSchema):
    """Completion state after a toggle."""

    user_id: str
    path_id: str
    category_id: str
    completed: bool


class UserProgress(BaseSchema):
    """Completed categories for one user across all paths."""

    user_id: str
    completed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)


class BranchProgress(BaseSchema):
    """Aggregate completion over the staff of one branch."""

    branch_id: str
    completed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)
    staff_count: int = Field(..., ge=0)
