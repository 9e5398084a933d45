"""
User profile schemas.

Identities live in the identity provider; the users table holds the
profile (name, username, role, branch) keyed by the identity id.
"""

from pydantic import Field, field_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema, TimestampMixin, NAME_MAX_LENGTH


class UserRole(str, Enum):
    """User roles."""
    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"

    @property
    def requires_branch(self) -> bool:
        """Staff and managers belong to a branch; admins do not."""
        return self in (UserRole.STAFF, UserRole.MANAGER)


class UserCreate(BaseSchema):
    """
    Create a new user.

    Required: name, username, password, role
    Required for staff/manager: branch_id
    """

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    username: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    password: str = Field(..., min_length=1, description="Initial password")
    role: UserRole
    branch_id: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_lowercase(cls, v):
        """Accept Staff/STAFF etc."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class UserUpdate(BaseSchema):
    """Update a user profile. Only provided fields are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    role: Optional[UserRole] = None
    branch_id: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_lowercase(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class UserResponse(BaseSchema, TimestampMixin):
    """User profile. Never includes the password."""

    id: str
    name: str
    username: str
    role: UserRole
    branch_id: Optional[str] = None
