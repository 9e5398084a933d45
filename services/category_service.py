"""
Category service.

Categories belong to one path; names are unique within their path and
serve as the lookup key when importing materials.
"""

from typing import Optional
import structlog
from supabase import AsyncClient

from config import get_supabase_client
from models.base import new_id
from models.catalog import CategoryCreate, CategoryUpdate, CategoryResponse
from exceptions import CategoryNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


class CategoryService:
    """Category CRUD and find-or-create scoped to a path."""

    def __init__(self, db: AsyncClient):
        self.db = db
        self.table = "categories"

    async def get_by_id(self, category_id: str) -> CategoryResponse:
        """
        Get a single category.

        Raises:
            CategoryNotFoundError: If category doesn't exist
        """
        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("id", category_id)
                .execute()
            )
        except Exception as e:
            logger.error("get_category_failed", category_id=category_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise CategoryNotFoundError(category_id)
        return CategoryResponse(**result.data[0])

    async def find_by_name(self, path_id: str, name: str) -> Optional[CategoryResponse]:
        """Find a category by exact name within a path."""
        logger.debug("finding_category_by_name", path_id=path_id, name=name)

        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("path_id", path_id)
                .eq("name", name)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_category_failed", path_id=path_id, name=name, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return None
        return CategoryResponse(**result.data[0])

    async def create(self, path_id: str, data: CategoryCreate) -> CategoryResponse:
        """
        Create a category under a path.

        The caller is responsible for checking the path exists.
        """
        category_id = new_id("cat")
        logger.info("creating_category", category_id=category_id, path_id=path_id, name=data.name)

        row = {"id": category_id, "path_id": path_id, "name": data.name}
        if data.description is not None:
            row["description"] = data.description

        try:
            result = await self.db.table(self.table).insert(row).execute()
        except Exception as e:
            logger.error("create_category_failed", path_id=path_id, name=data.name, error=str(e))
            raise DatabaseError("insert", str(e))

        logger.info("category_created", category_id=category_id)
        return CategoryResponse(**result.data[0])

    async def find_or_create(self, path_id: str, name: str) -> tuple[CategoryResponse, bool]:
        """
        Find category by name within path, or create it.

        Returns:
            Tuple of (category, created)
        """
        existing = await self.find_by_name(path_id, name)
        if existing:
            return existing, False

        logger.info("auto_creating_category", path_id=path_id, name=name)
        return await self.create(path_id, CategoryCreate(name=name)), True

    async def update(self, category_id: str, data: CategoryUpdate) -> CategoryResponse:
        """
        Update provided fields of a category.

        Raises:
            CategoryNotFoundError: If category doesn't exist
        """
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return await self.get_by_id(category_id)

        logger.info("updating_category", category_id=category_id, fields=list(update_data.keys()))

        try:
            result = (
                await self.db.table(self.table)
                .update(update_data)
                .eq("id", category_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_category_failed", category_id=category_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise CategoryNotFoundError(category_id)
        return CategoryResponse(**result.data[0])

    async def delete(self, category_id: str) -> None:
        """
        Delete a category and, by cascade, its materials.

        Raises:
            CategoryNotFoundError: If category doesn't exist
        """
        logger.info("deleting_category", category_id=category_id)

        try:
            result = (
                await self.db.table(self.table)
                .delete()
                .eq("id", category_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_category_failed", category_id=category_id, error=str(e))
            raise DatabaseError("delete", str(e))

        if not result.data:
            raise CategoryNotFoundError(category_id)


_category_service: Optional[CategoryService] = None


async def get_category_service() -> CategoryService:
    """Get or create CategoryService instance."""
    global _category_service
    if _category_service is None:
        _category_service = CategoryService(await get_supabase_client())
    return _category_service
