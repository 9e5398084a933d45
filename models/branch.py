"""
Branch models.

A branch is the site staff and managers belong to.
"""

from typing import Optional
from pydantic import Field

from models.base import BaseSchema, TimestampMixin, NAME_MAX_LENGTH


class BranchCreate(BaseSchema):
    """Create a new branch."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Branch name")
    region: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH, description="Region")
    manager_id: Optional[str] = Field(None, description="User id of the branch manager")


class BranchUpdate(BaseSchema):
    """Update a branch. Only provided fields are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    region: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    manager_id: Optional[str] = None


class BranchResponse(BaseSchema, TimestampMixin):
    """Branch response with all fields."""

    id: str = Field(..., description="Branch id")
    name: str = Field(..., description="Branch name")
    region: Optional[str] = Field(None, description="Region")
    manager_id: Optional[str] = Field(None, description="Manager user id")
