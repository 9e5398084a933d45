"""
Training path service.

Handles CRUD for training paths and assembles the full catalog
(paths with their categories and materials).
"""

from typing import Optional
import structlog
from supabase import AsyncClient

from config import get_supabase_client
from models.base import new_id
from models.catalog import (
    PathCreate,
    PathUpdate,
    PathResponse,
    CategoryResponse,
    MaterialResponse,
)
from exceptions import PathNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


class PathService:
    """
    Training path business logic.

    Handles CRUD operations for paths and find-or-create by name.
    """

    def __init__(self, db: AsyncClient):
        self.db = db
        self.table = "training_paths"

    # ===================
    # READ OPERATIONS
    # ===================

    async def get_catalog(self) -> list[PathResponse]:
        """
        Get all paths with nested categories and materials.

        Paths are ordered by name, categories by name within each path.

        Returns:
            List of PathResponse
        """
        logger.info("getting_catalog")

        try:
            paths = await self.db.table(self.table).select("*").order("name").execute()
            categories = await self.db.table("categories").select("*").execute()
            materials = await self.db.table("materials").select("*").execute()
        except Exception as e:
            logger.error("get_catalog_failed", error=str(e))
            raise DatabaseError("select", str(e))

        materials_by_category: dict[str, list[MaterialResponse]] = {}
        for row in materials.data:
            materials_by_category.setdefault(row["category_id"], []).append(
                MaterialResponse(**row)
            )

        categories_by_path: dict[str, list[CategoryResponse]] = {}
        for row in categories.data:
            category = CategoryResponse(
                **row,
                materials=materials_by_category.get(row["id"], [])
            )
            categories_by_path.setdefault(row["path_id"], []).append(category)

        catalog = [
            PathResponse(
                **row,
                categories=sorted(
                    categories_by_path.get(row["id"], []),
                    key=lambda c: c.name
                )
            )
            for row in paths.data
        ]

        logger.info(
            "catalog_retrieved",
            paths=len(catalog),
            categories=len(categories.data),
            materials=len(materials.data)
        )
        return catalog

    async def get_by_id(self, path_id: str) -> PathResponse:
        """
        Get a single path (without categories).

        Raises:
            PathNotFoundError: If path doesn't exist
        """
        logger.debug("getting_path", path_id=path_id)

        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("id", path_id)
                .execute()
            )
        except Exception as e:
            logger.error("get_path_failed", path_id=path_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise PathNotFoundError(path_id)
        return PathResponse(**result.data[0])

    async def find_by_name(self, name: str) -> Optional[PathResponse]:
        """
        Find a path by exact name.

        Returns:
            PathResponse if found, None otherwise
        """
        logger.debug("finding_path_by_name", name=name)

        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("name", name)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_path_failed", name=name, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return None
        return PathResponse(**result.data[0])

    # ===================
    # WRITE OPERATIONS
    # ===================

    async def create(self, data: PathCreate) -> PathResponse:
        """
        Create a new path with a fresh id.

        Raises:
            DatabaseError: If creation fails
        """
        path_id = new_id("path")
        logger.info("creating_path", path_id=path_id, name=data.name)

        try:
            result = (
                await self.db.table(self.table)
                .insert({"id": path_id, "name": data.name})
                .execute()
            )
        except Exception as e:
            logger.error("create_path_failed", name=data.name, error=str(e))
            raise DatabaseError("insert", str(e))

        logger.info("path_created", path_id=path_id)
        return PathResponse(**result.data[0])

    async def find_or_create(self, name: str) -> tuple[PathResponse, bool]:
        """
        Find path by exact name or create it.

        Returns:
            Tuple of (path, created)
        """
        existing = await self.find_by_name(name)
        if existing:
            return existing, False

        logger.info("auto_creating_path", name=name)
        return await self.create(PathCreate(name=name)), True

    async def rename(self, path_id: str, data: PathUpdate) -> PathResponse:
        """
        Rename a path.

        Raises:
            PathNotFoundError: If path doesn't exist
        """
        logger.info("renaming_path", path_id=path_id, name=data.name)

        try:
            result = (
                await self.db.table(self.table)
                .update({"name": data.name})
                .eq("id", path_id)
                .execute()
            )
        except Exception as e:
            logger.error("rename_path_failed", path_id=path_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise PathNotFoundError(path_id)
        return PathResponse(**result.data[0])

    async def delete(self, path_id: str) -> None:
        """
        Delete a path. Categories and materials cascade in the database.

        Raises:
            PathNotFoundError: If path doesn't exist
        """
        logger.info("deleting_path", path_id=path_id)

        try:
            result = (
                await self.db.table(self.table)
                .delete()
                .eq("id", path_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_path_failed", path_id=path_id, error=str(e))
            raise DatabaseError("delete", str(e))

        if not result.data:
            raise PathNotFoundError(path_id)
        logger.info("path_deleted", path_id=path_id)


# Singleton instance
_path_service: Optional[PathService] = None


async def get_path_service() -> PathService:
    """Get or create PathService instance."""
    global _path_service
    if _path_service is None:
        _path_service = PathService(await get_supabase_client())
    return _path_service
