"""
CSV bulk import models.

Parsed rows start life as plain ImportRow dicts keyed by lower-cased
header. The validator turns each into one of the typed rows below,
and the reconciliation engine folds per-row outcomes into an
ImportReport.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import BaseSchema, NAME_MAX_LENGTH, MATERIAL_NAME_MAX_LENGTH
from models.catalog import MaterialType
from models.user import UserRole


# Lower-cased column name -> trimmed value
ImportRow = dict[str, str]


class ImportKind(str, Enum):
    """Selects the validation rules and reconciliation pipeline."""
    MATERIALS = "materials"
    BRANCHES = "branches"
    USERS = "users"


# ===================
# TYPED ROWS
# ===================

class MaterialImportRow(BaseSchema):
    """Columns: path, category, material name (or material), type, url."""

    path: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    category: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    material: str = Field(..., min_length=1, max_length=MATERIAL_NAME_MAX_LENGTH)
    type: MaterialType
    url: str = ""


class BranchImportRow(BaseSchema):
    """Columns: branch name, region."""

    branch_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    region: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)


class UserImportRow(BaseSchema):
    """Columns: name, username, password, role, branch."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    username: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    password: str = Field(..., min_length=1)
    role: UserRole
    branch: Optional[str] = None


# ===================
# OUTCOMES AND REPORT
# ===================

class RowStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ImportOutcome:
    """Result for one data row. `row` is the line the record starts on."""
    row: int
    status: RowStatus
    reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == RowStatus.SUCCEEDED

    def message(self) -> str:
        """Human-readable failure line, e.g. "Row 3: Missing branch"."""
        return f"Row {self.row}: {self.reason}"


@dataclass
class ImportReport:
    """Aggregated result of one import run."""
    kind: ImportKind
    outcomes: list[ImportOutcome] = field(default_factory=list)
    max_error_details: int = 10

    @property
    def total_rows(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.total_rows - self.succeeded

    @property
    def failures(self) -> list[ImportOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    def record_success(self, row: int) -> ImportOutcome:
        outcome = ImportOutcome(row=row, status=RowStatus.SUCCEEDED)
        self.outcomes.append(outcome)
        return outcome

    def record_failure(self, row: int, reason: str) -> ImportOutcome:
        outcome = ImportOutcome(row=row, status=RowStatus.FAILED, reason=reason)
        self.outcomes.append(outcome)
        return outcome

    def error_messages(self) -> list[str]:
        """
        Failure messages capped at max_error_details.

        When more rows failed, the last entry is "+N more".
        """
        failures = self.failures
        messages = [o.message() for o in failures[:self.max_error_details]]
        hidden = len(failures) - len(messages)
        if hidden > 0:
            messages.append(f"+{hidden} more")
        return messages

    def summary(self) -> str:
        """One-line summary for user-facing feedback."""
        text = f"Imported {self.succeeded} of {self.total_rows} {self.kind.value} rows"
        if self.failed:
            text += f", {self.failed} failed"
        return text + "."

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "kind": self.kind.value,
            "total_rows": self.total_rows,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "summary": self.summary(),
            "errors": self.error_messages(),
            "outcomes": [
                {
                    "row": o.row,
                    "status": o.status.value,
                    "reason": o.reason,
                }
                for o in self.outcomes
            ],
        }


class ImportOutcomeResponse(BaseSchema):
    row: int
    status: RowStatus
    reason: Optional[str] = None


class ImportReportResponse(BaseSchema):
    """API response for a CSV import."""

    kind: ImportKind
    total_rows: int
    succeeded: int
    failed: int
    summary: str
    errors: list[str] = Field(default_factory=list, description="Capped failure messages")
    outcomes: list[ImportOutcomeResponse] = Field(default_factory=list)
