"""
Material service.

Materials are learning resources (document, video or link) attached
to a category.
"""

from typing import Optional
import structlog
from supabase import AsyncClient

from config import get_supabase_client
from models.base import new_id
from models.catalog import MaterialCreate, MaterialUpdate, MaterialResponse
from exceptions import MaterialNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


class MaterialService:

    def __init__(self, db: AsyncClient):
        self.db = db
        self.table = "materials"

    async def get_by_category(self, category_id: str) -> list[MaterialResponse]:
        """Get all materials of a category."""
        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("category_id", category_id)
                .execute()
            )
        except Exception as e:
            logger.error("get_materials_failed", category_id=category_id, error=str(e))
            raise DatabaseError("select", str(e))

        return [MaterialResponse(**row) for row in result.data]

    async def create(self, category_id: str, data: MaterialCreate) -> MaterialResponse:
        """
        Create a material with a fresh id.

        Raises:
            DatabaseError: If creation fails
        """
        material_id = new_id("mat")
        logger.info(
            "creating_material",
            material_id=material_id,
            category_id=category_id,
            name=data.name,
            type=data.type.value
        )

        try:
            result = (
                await self.db.table(self.table)
                .insert({
                    "id": material_id,
                    "category_id": category_id,
                    "name": data.name,
                    "type": data.type.value,
                    "url": data.url,
                })
                .execute()
            )
        except Exception as e:
            logger.error("create_material_failed", category_id=category_id, error=str(e))
            raise DatabaseError("insert", str(e))

        logger.info("material_created", material_id=material_id)
        return MaterialResponse(**result.data[0])

    async def update(self, material_id: str, data: MaterialUpdate) -> MaterialResponse:
        """
        Update provided fields of a material.

        Raises:
            MaterialNotFoundError: If material doesn't exist
        """
        update_data = data.model_dump(exclude_unset=True, mode="json")
        logger.info("updating_material", material_id=material_id, fields=list(update_data.keys()))

        try:
            query = self.db.table(self.table)
            if update_data:
                query = query.update(update_data)
            else:
                query = query.select("*")
            result = await query.eq("id", material_id).execute()
        except Exception as e:
            logger.error("update_material_failed", material_id=material_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise MaterialNotFoundError(material_id)
        return MaterialResponse(**result.data[0])

    async def delete(self, material_id: str) -> None:
        """
        Delete a material.

        Raises:
            MaterialNotFoundError: If material doesn't exist
        """
        logger.info("deleting_material", material_id=material_id)

        try:
            result = (
                await self.db.table(self.table)
                .delete()
                .eq("id", material_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_material_failed", material_id=material_id, error=str(e))
            raise DatabaseError("delete", str(e))

        if not result.data:
            raise MaterialNotFoundError(material_id)


_material_service: Optional[MaterialService] = None


async def get_material_service() -> MaterialService:
    """Get or create MaterialService instance."""
    global _material_service
    if _material_service is None:
        _material_service = MaterialService(await get_supabase_client())
    return _material_service
