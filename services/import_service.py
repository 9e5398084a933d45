"""
CSV import service.

Parses an upload, validates each row for its ImportKind and reconciles
it against the record store:

    materials: find-or-create path -> find-or-create category -> create material
    branches:  create branch (every row, no dedup by name)
    users:     resolve branch by name -> create identity with profile metadata

Rows are processed one at a time in input order and every store call
is awaited before the next step. Find-or-create on path and category
names is only safe this way, since nothing locks the name namespace.
A failing row is recorded in the report and the batch moves on; only
an unparseable file aborts the import.
"""

import inspect
from typing import Awaitable, Callable, Optional, Union
import structlog

from config import settings
from models.catalog import MaterialCreate, MaterialType
from models.branch import BranchCreate
from models.imports import (
    ImportKind,
    ImportOutcome,
    ImportReport,
    MaterialImportRow,
    BranchImportRow,
    UserImportRow,
)
from parsers.csv_parser import read_csv
from services.import_validator import validate_row, TypedImportRow
from services.path_service import PathService, get_path_service
from services.category_service import CategoryService, get_category_service
from services.material_service import MaterialService, get_material_service
from services.branch_service import BranchService, get_branch_service
from services.user_service import UserService, get_user_service, build_login_email
from exceptions import AppError, CSVParseError, InvalidImportKindError

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[ImportOutcome], Optional[Awaitable[None]]]


class RowFailure(Exception):
    """A reconciliation step failed for the current row only."""
    pass


class ImportService:
    """
    Reconciliation engine for CSV bulk imports.

    Holds no state between imports; each run_import call builds its own
    ImportReport.
    """

    def __init__(
        self,
        paths: PathService,
        categories: CategoryService,
        materials: MaterialService,
        branches: BranchService,
        users: UserService,
        default_material_type: Optional[MaterialType] = None,
        max_error_details: Optional[int] = None,
    ):
        self.paths = paths
        self.categories = categories
        self.materials = materials
        self.branches = branches
        self.users = users
        self.default_material_type = default_material_type or MaterialType(
            settings.default_material_type
        )
        self.max_error_details = max_error_details or settings.import_max_error_details

    async def run_import(
        self,
        raw: Union[str, bytes],
        kind: Union[ImportKind, str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportReport:
        """
        Import a CSV upload.

        Args:
            raw: File content (str, or UTF-8 bytes)
            kind: materials, branches or users
            on_progress: Optional callback (sync or async) called with
                each row's outcome as soon as the row is done

        Returns:
            ImportReport with per-row outcomes

        Raises:
            InvalidImportKindError: If kind is unknown
            CSVParseError: If the file is empty, has no data rows or
                cannot be tokenized. No row has been processed then.
        """
        kind = self._parse_kind(kind)

        table = read_csv(raw)
        if table.is_empty:
            raise CSVParseError("CSV file is empty")
        if not table.rows:
            raise CSVParseError(
                "CSV file has a header but no data rows",
                details={"header": table.header}
            )

        logger.info(
            "import_started",
            kind=kind.value,
            rows=len(table.rows),
            columns=table.header
        )

        report = ImportReport(kind=kind, max_error_details=self.max_error_details)

        for line, raw_row in table.numbered_rows():
            verdict = validate_row(raw_row, kind, self.default_material_type)

            if not verdict.valid:
                logger.info("import_row_rejected", kind=kind.value, row=line, reason=verdict.reason)
                outcome = report.record_failure(line, verdict.reason)
            else:
                outcome = await self._reconcile_row(kind, line, verdict.row, report)

            if on_progress is not None:
                result = on_progress(outcome)
                if inspect.isawaitable(result):
                    await result

        logger.info(
            "import_completed",
            kind=kind.value,
            total=report.total_rows,
            succeeded=report.succeeded,
            failed=report.failed
        )
        return report

    # ===================
    # PIPELINES
    # ===================

    async def _reconcile_row(
        self,
        kind: ImportKind,
        line: int,
        row: TypedImportRow,
        report: ImportReport,
    ) -> ImportOutcome:
        try:
            if kind == ImportKind.MATERIALS:
                await self._import_material(row)
            elif kind == ImportKind.BRANCHES:
                await self._import_branch(row)
            else:
                await self._import_user(row)
        except RowFailure as e:
            reason = str(e)
        except AppError as e:
            reason = e.message
        except Exception as e:
            logger.error(
                "import_row_unexpected_error",
                kind=kind.value,
                row=line,
                error=str(e),
                error_type=type(e).__name__
            )
            reason = f"Unexpected error: {e}"
        else:
            return report.record_success(line)

        logger.info("import_row_failed", kind=kind.value, row=line, reason=reason)
        return report.record_failure(line, reason)

    async def _import_material(self, row: MaterialImportRow) -> None:
        path, path_created = await self.paths.find_or_create(row.path)
        category, category_created = await self.categories.find_or_create(path.id, row.category)
        material = await self.materials.create(
            category.id,
            MaterialCreate(name=row.material, type=row.type, url=row.url)
        )
        logger.debug(
            "material_imported",
            path_id=path.id,
            path_created=path_created,
            category_id=category.id,
            category_created=category_created,
            material_id=material.id
        )

    async def _import_branch(self, row: BranchImportRow) -> None:
        branch = await self.branches.create(
            BranchCreate(name=row.branch_name, region=row.region)
        )
        logger.debug("branch_imported", branch_id=branch.id, name=branch.name)

    async def _import_user(self, row: UserImportRow) -> None:
        branch_id = None
        if row.role.requires_branch:
            branch = await self.branches.find_by_name(row.branch)
            if branch is None:
                raise RowFailure(f"Branch '{row.branch}' not found")
            branch_id = branch.id

        user_id = await self.users.create_identity(
            build_login_email(row.username),
            row.password,
            {
                "name": row.name,
                "username": row.username,
                "role": row.role.value,
                "branch_id": branch_id,
            }
        )
        logger.debug("user_imported", user_id=user_id, role=row.role.value)

    @staticmethod
    def _parse_kind(kind: Union[ImportKind, str]) -> ImportKind:
        if isinstance(kind, ImportKind):
            return kind
        try:
            return ImportKind(str(kind).strip().lower())
        except ValueError:
            raise InvalidImportKindError(str(kind), [k.value for k in ImportKind])


async def get_import_service() -> ImportService:
    """Build an ImportService over the shared record-store services."""
    return ImportService(
        paths=await get_path_service(),
        categories=await get_category_service(),
        materials=await get_material_service(),
        branches=await get_branch_service(),
        users=await get_user_service(),
    )
