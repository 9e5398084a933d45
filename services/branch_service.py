"""
Branch service.

Branch names are the lookup key used when importing users.
"""

from typing import Optional
import structlog
from supabase import AsyncClient

from config import get_supabase_client
from models.base import new_id
from models.branch import BranchCreate, BranchUpdate, BranchResponse
from models.user import UserRole
from exceptions import (
    BranchNotFoundError,
    InvalidManagerError,
    DatabaseError,
)

logger = structlog.get_logger(__name__)


class BranchService:
    """
    Branch business logic.

    Handles CRUD operations and exact-name lookup.
    """

    def __init__(self, db: AsyncClient):
        self.db = db
        self.table = "branches"

    # ===================
    # READ OPERATIONS
    # ===================

    async def get_all(self) -> list[BranchResponse]:
        """Get all branches ordered by name (small table, no pagination)."""
        try:
            result = await self.db.table(self.table).select("*").order("name").execute()
        except Exception as e:
            logger.error("get_branches_failed", error=str(e))
            raise DatabaseError("select", str(e))

        return [BranchResponse(**row) for row in result.data]

    async def get_by_id(self, branch_id: str) -> BranchResponse:
        """
        Get a single branch.

        Raises:
            BranchNotFoundError: If branch doesn't exist
        """
        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("id", branch_id)
                .execute()
            )
        except Exception as e:
            logger.error("get_branch_failed", branch_id=branch_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise BranchNotFoundError(branch_id)
        return BranchResponse(**result.data[0])

    async def find_by_name(self, name: str) -> Optional[BranchResponse]:
        """
        Find a branch by exact name.

        Returns:
            BranchResponse if found, None otherwise
        """
        logger.debug("finding_branch_by_name", name=name)

        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("name", name)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_branch_failed", name=name, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            logger.debug("branch_not_found", name=name)
            return None
        return BranchResponse(**result.data[0])

    # ===================
    # WRITE OPERATIONS
    # ===================

    async def create(self, data: BranchCreate) -> BranchResponse:
        """
        Create a branch with a fresh id.

        Does not check for an existing branch of the same name.

        Raises:
            InvalidManagerError: If manager_id is not a manager
            DatabaseError: If creation fails
        """
        if data.manager_id:
            await self._check_manager(data.manager_id)

        branch_id = new_id("branch")
        logger.info("creating_branch", branch_id=branch_id, name=data.name)

        try:
            result = (
                await self.db.table(self.table)
                .insert({
                    "id": branch_id,
                    "name": data.name,
                    "region": data.region,
                    "manager_id": data.manager_id,
                })
                .execute()
            )
        except Exception as e:
            logger.error("create_branch_failed", name=data.name, error=str(e))
            raise DatabaseError("insert", str(e))

        logger.info("branch_created", branch_id=branch_id)
        return BranchResponse(**result.data[0])

    async def update(self, branch_id: str, data: BranchUpdate) -> BranchResponse:
        """
        Update provided fields of a branch.

        Raises:
            BranchNotFoundError: If branch doesn't exist
            InvalidManagerError: If manager_id is not a manager
        """
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return await self.get_by_id(branch_id)

        if update_data.get("manager_id"):
            await self._check_manager(update_data["manager_id"])

        logger.info("updating_branch", branch_id=branch_id, fields=list(update_data.keys()))

        try:
            result = (
                await self.db.table(self.table)
                .update(update_data)
                .eq("id", branch_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_branch_failed", branch_id=branch_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise BranchNotFoundError(branch_id)
        return BranchResponse(**result.data[0])

    async def delete(self, branch_id: str) -> None:
        """
        Delete a branch.

        Raises:
            BranchNotFoundError: If branch doesn't exist
        """
        logger.info("deleting_branch", branch_id=branch_id)

        try:
            result = (
                await self.db.table(self.table)
                .delete()
                .eq("id", branch_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_branch_failed", branch_id=branch_id, error=str(e))
            raise DatabaseError("delete", str(e))

        if not result.data:
            raise BranchNotFoundError(branch_id)

    async def _check_manager(self, user_id: str) -> None:
        """Raise InvalidManagerError unless user_id is a manager."""
        try:
            result = (
                await self.db.table("users")
                .select("id, role")
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("check_manager_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data or result.data[0].get("role") != UserRole.MANAGER.value:
            raise InvalidManagerError(user_id)


_branch_service: Optional[BranchService] = None


async def get_branch_service() -> BranchService:
    """Get or create BranchService instance."""
    global _branch_service
    if _branch_service is None:
        _branch_service = BranchService(await get_supabase_client())
    return _branch_service
