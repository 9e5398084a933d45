"""
Training catalog schemas: paths, categories and materials.

A path groups categories; a category holds materials and is the unit
whose completion is tracked per user.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema, TimestampMixin, NAME_MAX_LENGTH, MATERIAL_NAME_MAX_LENGTH


class MaterialType(str, Enum):
    """Kind of learning resource."""
    DOCUMENT = "document"
    VIDEO = "video"
    LINK = "link"

    @classmethod
    def normalize(cls, value: Optional[str], default: "MaterialType") -> "MaterialType":
        """Lower-case and match a raw type, falling back to default."""
        if not value:
            return default
        try:
            return cls(value.strip().lower())
        except ValueError:
            return default


# ===================
# PATHS
# ===================

class PathCreate(BaseSchema):
    """Create a new training path."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Path name")


class PathUpdate(BaseSchema):
    """Rename a training path."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="New path name")


# ===================
# CATEGORIES
# ===================

class CategoryCreate(BaseSchema):
    """Create a category under a path."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Category name")
    description: Optional[str] = Field(None, description="Optional description")


class CategoryUpdate(BaseSchema):
    """
    Update a category.

    All fields optional - only provided fields are updated.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = None


# ===================
# MATERIALS
# ===================

class MaterialCreate(BaseSchema):
    """Attach a material to a category."""

    name: str = Field(..., min_length=1, max_length=MATERIAL_NAME_MAX_LENGTH, description="Material name")
    type: MaterialType = Field(MaterialType.DOCUMENT, description="document, video or link")
    url: str = Field("", description="Location of the resource")


class MaterialUpdate(BaseSchema):
    """
    Update a material.

    All fields optional - only provided fields are updated.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=MATERIAL_NAME_MAX_LENGTH)
    type: Optional[MaterialType] = None
    url: Optional[str] = None


# ===================
# RESPONSES
# ===================

class MaterialResponse(BaseSchema, TimestampMixin):
    """Material with all fields."""

    id: str
    category_id: str
    name: str
    type: MaterialType = MaterialType.DOCUMENT
    url: str = ""


class CategoryResponse(BaseSchema, TimestampMixin):
    """Category, optionally with its materials."""

    id: str
    path_id: str
    name: str
    description: Optional[str] = None
    materials: list[MaterialResponse] = Field(default_factory=list)


class PathResponse(BaseSchema, TimestampMixin):
    """Training path, optionally with its categories."""

    id: str
    name: str
    categories: list[CategoryResponse] = Field(default_factory=list)
