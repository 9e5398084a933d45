"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
    DatabaseError,

    # Catalog
    PathNotFoundError,
    CategoryNotFoundError,
    MaterialNotFoundError,

    # Branches / users
    BranchNotFoundError,
    UserNotFoundError,
    InvalidBranchAssignmentError,
    InvalidManagerError,
    IdentityProviderError,

    # CSV import
    CSVParseError,
    InvalidImportKindError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "DatabaseError",

    # Catalog
    "PathNotFoundError",
    "CategoryNotFoundError",
    "MaterialNotFoundError",

    # Branches / users
    "BranchNotFoundError",
    "UserNotFoundError",
    "InvalidBranchAssignmentError",
    "InvalidManagerError",
    "IdentityProviderError",

    # CSV import
    "CSVParseError",
    "InvalidImportKindError",
]
