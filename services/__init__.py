"""
Business logic services.

Each service handles one domain area.
"""

from services.path_service import PathService, get_path_service
from services.category_service import CategoryService, get_category_service
from services.material_service import MaterialService, get_material_service
from services.branch_service import BranchService, get_branch_service
from services.user_service import UserService, get_user_service, build_login_email
from services.progress_service import ProgressService, get_progress_service, completion_percentage
from services.import_validator import validate_row, RowVerdict
from services.import_service import ImportService, get_import_service

__all__ = [
    "PathService",
    "get_path_service",
    "CategoryService",
    "get_category_service",
    "MaterialService",
    "get_material_service",
    "BranchService",
    "get_branch_service",
    "UserService",
    "get_user_service",
    "build_login_email",
    "ProgressService",
    "get_progress_service",
    "completion_percentage",
    "validate_row",
    "RowVerdict",
    "ImportService",
    "get_import_service",
]
