"""
Base schemas and mixins for all models.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional
from uuid import uuid4


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class TimestampMixin(BaseModel):
    """Add timestamps to response models."""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def new_id(prefix: str) -> str:
    """
    Generate a record identifier such as "path-3f2a...".

    Tables use text primary keys with a type prefix, so ids are
    generated client-side before insert.
    """
    return f"{prefix}-{uuid4().hex}"


# Column limits shared by API schemas and CSV import rows
NAME_MAX_LENGTH = 200
MATERIAL_NAME_MAX_LENGTH = 300
