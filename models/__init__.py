"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
    new_id,
)
from models.catalog import (
    MaterialType,
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
from models.branch import (
    BranchCreate,
    BranchUpdate,
    BranchResponse,
)
from models.user import (
    UserRole,
    UserCreate,
    UserUpdate,
    UserResponse,
)
from models.progress import (
    ProgressToggle,
    ProgressToggleResponse,
    UserProgress,
    BranchProgress,
)
from models.imports import (
    ImportRow,
    ImportKind,
    MaterialImportRow,
    BranchImportRow,
    UserImportRow,
    RowStatus,
    ImportOutcome,
    ImportReport,
    ImportReportResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",
    "new_id",

    # Catalog
    "MaterialType",
    "PathCreate",
    "PathUpdate",
    "PathResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "MaterialCreate",
    "MaterialUpdate",
    "MaterialResponse",

    # Branches
    "BranchCreate",
    "BranchUpdate",
    "BranchResponse",

    # Users
    "UserRole",
    "UserCreate",
    "UserUpdate",
    "UserResponse",

    # Progress
    "ProgressToggle",
    "ProgressToggleResponse",
    "UserProgress",
    "BranchProgress",

    # Imports
    "ImportRow",
    "ImportKind",
    "MaterialImportRow",
    "BranchImportRow",
    "UserImportRow",
    "RowStatus",
    "ImportOutcome",
    "ImportReport",
    "ImportReportResponse",
]
