"""
CSV bulk import routes.

One endpoint per import kind: materials, branches, users. The response
is the final ImportReport; per-row problems never fail the request.
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse
import structlog

from config import settings
from models.imports import ImportKind, ImportReportResponse
from services.import_service import get_import_service
from exceptions import AppError, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/imports", tags=["Imports"])


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


@router.post("/{kind}", response_model=ImportReportResponse)
async def import_csv(kind: ImportKind, file: UploadFile = File(...)):
    """
    Bulk import from a CSV file.

    Expected headers:
        materials: path, category, material name (or material), type, url
        branches:  branch name, region
        users:     name, username, password, role, branch

    Raises:
        422: File too large, empty, or not parseable as CSV
    """
    logger.info(
        "import_upload_started",
        kind=kind.value,
        filename=file.filename,
        content_type=file.content_type
    )

    try:
        content = await file.read()
        if len(content) > settings.import_max_file_bytes:
            raise ValidationError(
                f"File exceeds {settings.import_max_file_bytes} bytes",
                code="IMPORT_FILE_TOO_LARGE",
                details={"size": len(content)}
            )

        service = await get_import_service()
        report = await service.run_import(content, kind)

        logger.info(
            "import_upload_completed",
            kind=kind.value,
            filename=file.filename,
            succeeded=report.succeeded,
            failed=report.failed
        )
        return ImportReportResponse(**report.to_dict())

    except Exception as e:
        logger.warning("import_upload_failed", kind=kind.value, error=str(e))
        return handle_error(e)
