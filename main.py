"""
Training Tracker API.

Serves the training catalog (paths, categories, materials), branches,
users, per-category progress and the CSV bulk import endpoints.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from config import settings, check_connection
from config.logging_config import configure_logging
from models.imports import ImportKind
from services.import_validator import REQUIRED_COLUMNS, MATERIAL_NAME_COLUMNS

configure_logging(settings)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration and check the database before serving."""
    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug,
        user_creation_enabled=settings.admin_configured,
        default_material_type=settings.default_material_type
    )

    db_status = await check_connection()
    if db_status["status"] == "healthy":
        logger.info(
            "database_connected",
            paths=db_status["paths_count"],
            branches=db_status["branches_count"]
        )
    else:
        # Serve anyway; /health reports the degraded state
        logger.error("database_connection_failed", error=db_status.get("error"))

    if not settings.admin_configured:
        logger.warning("user_creation_disabled", reason="SUPABASE_SERVICE_KEY not set")

    yield

    logger.info("application_shutting_down")


app = FastAPI(
    title="Training Tracker",
    description="Training paths, branch progress and CSV bulk import for staff training",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def import_formats() -> dict:
    """Accepted CSV columns per import kind, required ones first."""
    optional = {
        ImportKind.MATERIALS: ["type", "url"],
        ImportKind.BRANCHES: ["region"],
        ImportKind.USERS: ["branch"],
    }
    formats = {}
    for kind, required in REQUIRED_COLUMNS.items():
        formats[kind.value] = {
            "required": list(required),
            "optional": optional[kind],
        }
    formats[ImportKind.MATERIALS.value]["aliases"] = {
        MATERIAL_NAME_COLUMNS[0]: list(MATERIAL_NAME_COLUMNS[1:])
    }
    return formats


# ===================
# ROUTES
# ===================

@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Status is "degraded" when the database check fails.
    """
    db_status = await check_connection()

    return {
        "status": "healthy" if db_status["status"] == "healthy" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "database": db_status,
        "user_creation": "enabled" if settings.admin_configured else "disabled",
    }


@app.get("/")
async def root():
    """API information, endpoints and CSV import formats."""
    return {
        "name": "Training Tracker API",
        "version": "0.1.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/health",
        "endpoints": {
            "paths": "/api/paths",
            "branches": "/api/branches",
            "users": "/api/users",
            "progress": "/api/progress",
            "imports": "/api/imports/{kind}",
        },
        "imports": import_formats(),
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Last-resort handler; routes convert AppError themselves."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": str(exc) if settings.debug else None,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        }
    )


from routes import (  # noqa: E402
    catalog_router,
    branches_router,
    users_router,
    progress_router,
    imports_router,
)

# Each router carries its own /api/... prefix
for router in (catalog_router, branches_router, users_router, progress_router, imports_router):
    app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
