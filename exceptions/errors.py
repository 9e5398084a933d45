"""
Custom exception classes for the application.

Per-row import problems are never raised out of the import pipeline;
they are folded into the ImportReport. Everything here is for fatal
or API-level errors.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PATH_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# CATALOG ERRORS
# ===================

class PathNotFoundError(NotFoundError):
    """Training path not found."""

    def __init__(self, path_id: str):
        super().__init__(
            resource="Training path",
            identifier=path_id,
            code="PATH_NOT_FOUND"
        )


class CategoryNotFoundError(NotFoundError):
    """Category not found."""

    def __init__(self, category_id: str):
        super().__init__(
            resource="Category",
            identifier=category_id,
            code="CATEGORY_NOT_FOUND"
        )


class MaterialNotFoundError(NotFoundError):
    """Material not found."""

    def __init__(self, material_id: str):
        super().__init__(
            resource="Material",
            identifier=material_id,
            code="MATERIAL_NOT_FOUND"
        )


# ===================
# BRANCH / USER ERRORS
# ===================

class BranchNotFoundError(NotFoundError):
    """Branch not found."""

    def __init__(self, branch_id: str):
        super().__init__(
            resource="Branch",
            identifier=branch_id,
            code="BRANCH_NOT_FOUND"
        )


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: str):
        super().__init__(
            resource="User",
            identifier=user_id,
            code="USER_NOT_FOUND"
        )


class InvalidBranchAssignmentError(ValidationError):
    """Branch reference does not fit the user's role."""

    def __init__(self, role: str, branch_id: Optional[str]):
        if branch_id:
            message = f"{role} users cannot belong to a branch"
        else:
            message = f"{role} users must belong to a branch"
        super().__init__(
            code="USER_INVALID_BRANCH",
            message=message,
            details={"role": role, "branch_id": branch_id}
        )


class InvalidManagerError(ValidationError):
    """Branch manager must be a user with role manager."""

    def __init__(self, user_id: str):
        super().__init__(
            code="BRANCH_INVALID_MANAGER",
            message="Branch manager must be a user with role manager",
            details={"manager_id": user_id}
        )


class IdentityProviderError(ExternalServiceError):
    """Identity provider rejected or failed a request."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            service="identity_provider",
            message=message,
            details=details
        )


# ===================
# CSV IMPORT ERRORS
# ===================

class CSVParseError(ValidationError):
    """CSV text could not be turned into rows. Aborts the whole import."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="CSV_PARSE_ERROR",
            message=message,
            details=details
        )


class InvalidImportKindError(ValidationError):
    """Unknown import kind."""

    def __init__(self, kind: str, valid: list[str]):
        super().__init__(
            code="IMPORT_INVALID_KIND",
            message=f"Import kind must be one of: {', '.join(valid)}",
            details={"provided": kind, "valid": valid}
        )
