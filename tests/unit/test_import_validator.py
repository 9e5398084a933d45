"""
Unit tests for CSV import row validation.

Run: pytest tests/unit/test_import_validator.py -v
"""

from models.catalog import MaterialType
from models.imports import ImportKind
from models.user import UserRole
from services.import_validator import (
    validate_row,
    validate_material_row,
    validate_branch_row,
    validate_user_row,
)


class TestValidateMaterialRow:
    """Tests for validate_material_row()"""

    def test_complete_row_accepted(self):
        """Should build a typed row from all columns."""
        verdict = validate_material_row({
            "path": "Sales",
            "category": "Basics",
            "material name": "Intro",
            "type": "video",
            "url": "https://example.com/intro",
        })

        assert verdict.valid
        assert verdict.row.path == "Sales"
        assert verdict.row.category == "Basics"
        assert verdict.row.material == "Intro"
        assert verdict.row.type == MaterialType.VIDEO
        assert verdict.row.url == "https://example.com/intro"

    def test_material_column_synonym(self):
        """Should accept 'material' in place of 'material name'."""
        verdict = validate_material_row({"path": "P", "category": "C", "material": "M"})

        assert verdict.valid
        assert verdict.row.material == "M"

    def test_missing_type_and_url_use_defaults(self):
        """Should default type to the configured type and url to empty."""
        verdict = validate_material_row(
            {"path": "P", "category": "C", "material name": "M"},
            default_type=MaterialType.LINK
        )

        assert verdict.row.type == MaterialType.LINK
        assert verdict.row.url == ""

    def test_unknown_type_falls_back_to_default(self):
        verdict = validate_material_row(
            {"path": "P", "category": "C", "material name": "M", "type": "podcast"}
        )

        assert verdict.row.type == MaterialType.DOCUMENT

    def test_type_is_case_insensitive(self):
        verdict = validate_material_row(
            {"path": "P", "category": "C", "material name": "M", "type": "VIDEO"}
        )

        assert verdict.row.type == MaterialType.VIDEO

    def test_missing_required_fields_rejected(self):
        """Should name every missing column."""
        verdict = validate_material_row({"path": "P", "category": "", "material name": ""})

        assert not verdict.valid
        assert verdict.reason == "Missing required field(s): category, material name"

    def test_material_name_over_limit_rejected(self):
        """Should reject a 301-character material name with a readable reason."""
        verdict = validate_material_row({"path": "P", "category": "C", "material name": "M" * 301})

        assert not verdict.valid
        assert verdict.reason == "material name exceeds 300 characters"

    def test_material_name_at_limit_accepted(self):
        verdict = validate_material_row({"path": "P", "category": "C", "material": "M" * 300})

        assert verdict.valid

    def test_path_name_over_limit_rejected(self):
        verdict = validate_material_row({"path": "P" * 201, "category": "C", "material name": "M"})

        assert not verdict.valid
        assert verdict.reason == "path exceeds 200 characters"

    def test_whitespace_only_counts_as_missing(self):
        verdict = validate_material_row({"path": "   ", "category": "C", "material name": "M"})

        assert not verdict.valid
        assert "path" in verdict.reason


class TestValidateBranchRow:
    """Tests for validate_branch_row()"""

    def test_branch_with_region(self):
        verdict = validate_branch_row({"branch name": "North", "region": "Coast"})

        assert verdict.valid
        assert verdict.row.branch_name == "North"
        assert verdict.row.region == "Coast"

    def test_missing_region_is_none(self):
        verdict = validate_branch_row({"branch name": "North"})

        assert verdict.row.region is None

    def test_branch_name_over_limit_rejected(self):
        verdict = validate_branch_row({"branch name": "B" * 201, "region": "R" * 201})

        assert not verdict.valid
        assert verdict.reason == "branch name exceeds 200 characters; region exceeds 200 characters"

    def test_missing_branch_name_rejected(self):
        verdict = validate_branch_row({"branch name": "", "region": "Coast"})

        assert not verdict.valid
        assert "branch name" in verdict.reason


class TestValidateUserRow:
    """Tests for validate_user_row()"""

    def _row(self, **overrides) -> dict:
        row = {
            "name": "Alice Smith",
            "username": "alice",
            "password": "s3cret!",
            "role": "staff",
            "branch": "Downtown",
        }
        row.update(overrides)
        return row

    def test_staff_with_branch_accepted(self):
        verdict = validate_user_row(self._row())

        assert verdict.valid
        assert verdict.row.role == UserRole.STAFF
        assert verdict.row.branch == "Downtown"

    def test_role_is_case_insensitive(self):
        verdict = validate_user_row(self._row(role="Manager"))

        assert verdict.row.role == UserRole.MANAGER

    def test_invalid_role_rejected(self):
        """Should list the valid roles in the reason."""
        verdict = validate_user_row(self._row(role="owner"))

        assert not verdict.valid
        assert verdict.reason == "Invalid role 'owner' (expected one of: staff, manager, admin)"

    def test_staff_without_branch_rejected(self):
        verdict = validate_user_row(self._row(branch=""))

        assert not verdict.valid
        assert "branch" in verdict.reason

    def test_manager_without_branch_rejected(self):
        verdict = validate_user_row(self._row(role="manager", branch=""))

        assert not verdict.valid
        assert verdict.reason == "Missing branch for manager user"

    def test_admin_branch_is_dropped(self):
        """Should ignore any branch given for an admin."""
        verdict = validate_user_row(self._row(role="admin", branch="Downtown"))

        assert verdict.valid
        assert verdict.row.branch is None

    def test_missing_password_rejected(self):
        verdict = validate_user_row(self._row(password=""))

        assert not verdict.valid
        assert verdict.reason == "Missing required field(s): password"


class TestValidateRowDispatch:
    """Tests for validate_row()"""

    def test_dispatches_by_kind(self):
        row = {"branch name": "North"}

        assert validate_row(row, ImportKind.BRANCHES).valid
        assert not validate_row(row, ImportKind.MATERIALS).valid
        assert not validate_row(row, ImportKind.USERS).valid

    def test_passes_default_material_type(self):
        verdict = validate_row(
            {"path": "P", "category": "C", "material name": "M"},
            ImportKind.MATERIALS,
            MaterialType.VIDEO
        )

        assert verdict.row.type == MaterialType.VIDEO
