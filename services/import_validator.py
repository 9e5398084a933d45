"""
Row validation for CSV imports.

Checks one parsed ImportRow against the required columns and length
limits of its ImportKind and turns it into a typed row. Never raises:
every row gets a verdict so the batch can continue.

Accepted headers (lower-cased by the parser):
    materials: path, category, material name | material, type, url
    branches:  branch name, region
    users:     name, username, password, role, branch
"""

from dataclasses import dataclass
from typing import Optional, Union

from models.base import NAME_MAX_LENGTH, MATERIAL_NAME_MAX_LENGTH
from models.catalog import MaterialType
from models.imports import (
    ImportRow,
    ImportKind,
    MaterialImportRow,
    BranchImportRow,
    UserImportRow,
)
from models.user import UserRole

TypedImportRow = Union[MaterialImportRow, BranchImportRow, UserImportRow]

# Column names, kept exactly as users write them in their spreadsheets
MATERIAL_NAME_COLUMNS = ("material name", "material")

REQUIRED_COLUMNS: dict[ImportKind, tuple[str, ...]] = {
    ImportKind.MATERIALS: ("path", "category", "material name"),
    ImportKind.BRANCHES: ("branch name",),
    ImportKind.USERS: ("name", "username", "password", "role"),
}

MAX_LENGTHS: dict[ImportKind, dict[str, int]] = {
    ImportKind.MATERIALS: {
        "path": NAME_MAX_LENGTH,
        "category": NAME_MAX_LENGTH,
        "material name": MATERIAL_NAME_MAX_LENGTH,
    },
    ImportKind.BRANCHES: {"branch name": NAME_MAX_LENGTH, "region": NAME_MAX_LENGTH},
    ImportKind.USERS: {"name": NAME_MAX_LENGTH, "username": NAME_MAX_LENGTH},
}


@dataclass
class RowVerdict:
    """Validation result: a typed row, or a rejection reason."""
    row: Optional[TypedImportRow] = None
    reason: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.row is not None

    @classmethod
    def accept(cls, row: TypedImportRow) -> "RowVerdict":
        return cls(row=row)

    @classmethod
    def reject(cls, reason: str) -> "RowVerdict":
        return cls(reason=reason)


def _value(row: ImportRow, *columns: str) -> str:
    """First non-empty value among synonym columns."""
    for column in columns:
        value = (row.get(column) or "").strip()
        if value:
            return value
    return ""


def _missing(row: ImportRow, kind: ImportKind) -> list[str]:
    missing = []
    for column in REQUIRED_COLUMNS[kind]:
        synonyms = MATERIAL_NAME_COLUMNS if column == "material name" else (column,)
        if not _value(row, *synonyms):
            missing.append(column)
    return missing


def _missing_reason(missing: list[str]) -> str:
    return "Missing required field(s): " + ", ".join(missing)


def _too_long(row: ImportRow, kind: ImportKind) -> Optional[str]:
    """Rejection reason for values longer than their column allows."""
    problems = []
    for column, limit in MAX_LENGTHS[kind].items():
        synonyms = MATERIAL_NAME_COLUMNS if column == "material name" else (column,)
        if len(_value(row, *synonyms)) > limit:
            problems.append(f"{column} exceeds {limit} characters")
    return "; ".join(problems) or None


def validate_material_row(
    row: ImportRow,
    default_type: MaterialType = MaterialType.DOCUMENT
) -> RowVerdict:
    missing = _missing(row, ImportKind.MATERIALS)
    if missing:
        return RowVerdict.reject(_missing_reason(missing))
    too_long = _too_long(row, ImportKind.MATERIALS)
    if too_long:
        return RowVerdict.reject(too_long)

    return RowVerdict.accept(MaterialImportRow(
        path=_value(row, "path"),
        category=_value(row, "category"),
        material=_value(row, *MATERIAL_NAME_COLUMNS),
        type=MaterialType.normalize(_value(row, "type"), default_type),
        url=_value(row, "url"),
    ))


def validate_branch_row(row: ImportRow) -> RowVerdict:
    missing = _missing(row, ImportKind.BRANCHES)
    if missing:
        return RowVerdict.reject(_missing_reason(missing))
    too_long = _too_long(row, ImportKind.BRANCHES)
    if too_long:
        return RowVerdict.reject(too_long)

    return RowVerdict.accept(BranchImportRow(
        branch_name=_value(row, "branch name"),
        region=_value(row, "region") or None,
    ))


def validate_user_row(row: ImportRow) -> RowVerdict:
    missing = _missing(row, ImportKind.USERS)
    if missing:
        return RowVerdict.reject(_missing_reason(missing))
    too_long = _too_long(row, ImportKind.USERS)
    if too_long:
        return RowVerdict.reject(too_long)

    raw_role = _value(row, "role")
    try:
        role = UserRole(raw_role.lower())
    except ValueError:
        valid = ", ".join(r.value for r in UserRole)
        return RowVerdict.reject(f"Invalid role '{raw_role}' (expected one of: {valid})")

    branch = _value(row, "branch")
    if role.requires_branch and not branch:
        return RowVerdict.reject(f"Missing branch for {role.value} user")

    return RowVerdict.accept(UserImportRow(
        name=_value(row, "name"),
        username=_value(row, "username"),
        password=_value(row, "password"),
        role=role,
        # Admins never belong to a branch
        branch=branch if role.requires_branch else None,
    ))


def validate_row(
    row: ImportRow,
    kind: ImportKind,
    default_material_type: MaterialType = MaterialType.DOCUMENT
) -> RowVerdict:
    """
    Validate one parsed row for an import kind.

    Args:
        row: Parsed row keyed by lower-cased header
        kind: Selects the ruleset
        default_material_type: Type used for materials with a missing
            or unknown type

    Returns:
        RowVerdict with the typed row, or the rejection reason
    """
    if kind == ImportKind.MATERIALS:
        return validate_material_row(row, default_material_type)
    if kind == ImportKind.BRANCHES:
        return validate_branch_row(row)
    return validate_user_row(row)
