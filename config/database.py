"""
Database connection management.

Provides cached async Supabase clients for the record store and the
identity provider (auth admin API).
"""

from supabase import acreate_client, AsyncClient
from typing import Optional
import structlog

from config.settings import settings

logger = structlog.get_logger(__name__)


class DatabaseError(Exception):
    """Base exception for database errors."""
    pass


class ConnectionError(DatabaseError):
    """Failed to connect to database."""
    pass


_client: Optional[AsyncClient] = None
_admin_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """
    Get cached async Supabase client instance.

    The client is created on first use and reused afterwards.
    Call reset_connection() to reconnect.

    Returns:
        AsyncClient: Supabase client

    Raises:
        ConnectionError: If the client cannot be created
    """
    global _client
    if _client is not None:
        return _client

    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        _client = await acreate_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info("supabase_connected", status="success")
        return _client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ConnectionError(f"Failed to connect to Supabase: {e}") from e


async def get_admin_client() -> Optional[AsyncClient]:
    """
    Get Supabase client with service role key (admin access).

    Only available if SUPABASE_SERVICE_KEY is configured. Needed for
    auth.admin.create_user when importing or creating users.

    Returns:
        AsyncClient: Admin Supabase client, or None if not configured
    """
    global _admin_client
    if not settings.supabase_service_key:
        logger.warning("admin_client_not_configured")
        return None
    if _admin_client is not None:
        return _admin_client

    try:
        _admin_client = await acreate_client(
            settings.supabase_url,
            settings.supabase_service_key
        )
        return _admin_client
    except Exception as e:
        logger.error("admin_client_failed", error=str(e))
        return None


# Convenience alias
db = get_supabase_client


# ===================
# HELPER FUNCTIONS
# ===================

async def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    try:
        client = await get_supabase_client()

        paths = await client.table("training_paths").select("id", count="exact").execute()
        branches = await client.table("branches").select("id", count="exact").execute()

        return {
            "status": "healthy",
            "paths_count": paths.count,
            "branches_count": branches.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }


def reset_connection():
    """
    Reset the cached database connections.

    Call this if connection becomes stale or after config changes.
    """
    global _client, _admin_client
    _client = None
    _admin_client = None
    logger.info("database_connection_reset")
