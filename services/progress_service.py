"""
Training progress service.

Completion is tracked per (user, path, category) in user_progress.
A row with completed=true means done; no row means not done.
"""

from typing import Optional
import structlog
from supabase import AsyncClient

from config import get_supabase_client
from models.progress import (
    ProgressToggle,
    ProgressToggleResponse,
    UserProgress,
    BranchProgress,
)
from models.user import UserRole
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    """
    Percentage rounded half up (2 of 8 -> 25, 1 of 8 -> 13).

    Returns 0 when there is nothing to complete.
    """
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)


class ProgressService:

    def __init__(self, db: AsyncClient):
        self.db = db
        self.table = "user_progress"

    async def toggle(self, data: ProgressToggle) -> ProgressToggleResponse:
        """
        Flip completion of a category for a user.

        Marking complete upserts the row; marking incomplete deletes it.
        """
        key = {
            "user_id": data.user_id,
            "path_id": data.path_id,
            "category_id": data.category_id,
        }

        try:
            existing = (
                await self.db.table(self.table)
                .select("completed")
                .eq("user_id", data.user_id)
                .eq("path_id", data.path_id)
                .eq("category_id", data.category_id)
                .execute()
            )
            was_complete = any(row.get("completed") for row in existing.data)

            if was_complete:
                await (
                    self.db.table(self.table)
                    .delete()
                    .eq("user_id", data.user_id)
                    .eq("path_id", data.path_id)
                    .eq("category_id", data.category_id)
                    .execute()
                )
            else:
                await self.db.table(self.table).upsert({**key, "completed": True}).execute()
        except Exception as e:
            logger.error("toggle_progress_failed", **key, error=str(e))
            raise DatabaseError("upsert", str(e))

        logger.info("progress_toggled", **key, completed=not was_complete)
        return ProgressToggleResponse(**key, completed=not was_complete)

    async def get_user_progress(self, user_id: str) -> UserProgress:
        """Completed categories for one user out of all categories."""
        category_keys = await self._category_keys()
        done = await self._completed_keys([user_id])

        completed = len(done.get(user_id, set()) & category_keys)
        total = len(category_keys)
        return UserProgress(
            user_id=user_id,
            completed=completed,
            total=total,
            percentage=completion_percentage(completed, total)
        )

    async def get_branch_progress(self, branch_id: str) -> BranchProgress:
        """
        Aggregate completion over the staff of a branch.

        Managers are not counted; each staff member contributes every
        category to the total.
        """
        try:
            staff = (
                await self.db.table("users")
                .select("id")
                .eq("branch_id", branch_id)
                .eq("role", UserRole.STAFF.value)
                .execute()
            )
        except Exception as e:
            logger.error("get_branch_staff_failed", branch_id=branch_id, error=str(e))
            raise DatabaseError("select", str(e))

        staff_ids = [row["id"] for row in staff.data]
        category_keys = await self._category_keys()
        done = await self._completed_keys(staff_ids) if staff_ids else {}

        completed = sum(len(done.get(uid, set()) & category_keys) for uid in staff_ids)
        total = len(category_keys) * len(staff_ids)

        logger.info(
            "branch_progress_computed",
            branch_id=branch_id,
            staff_count=len(staff_ids),
            completed=completed,
            total=total
        )
        return BranchProgress(
            branch_id=branch_id,
            completed=completed,
            total=total,
            percentage=completion_percentage(completed, total),
            staff_count=len(staff_ids)
        )

    async def _category_keys(self) -> set[tuple[str, str]]:
        try:
            result = await self.db.table("categories").select("id, path_id").execute()
        except Exception as e:
            logger.error("get_categories_failed", error=str(e))
            raise DatabaseError("select", str(e))
        return {(row["path_id"], row["id"]) for row in result.data}

    async def _completed_keys(self, user_ids: list[str]) -> dict[str, set[tuple[str, str]]]:
        try:
            result = (
                await self.db.table(self.table)
                .select("user_id, path_id, category_id, completed")
                .in_("user_id", user_ids)
                .eq("completed", True)
                .execute()
            )
        except Exception as e:
            logger.error("get_progress_failed", error=str(e))
            raise DatabaseError("select", str(e))

        done: dict[str, set[tuple[str, str]]] = {}
        for row in result.data:
            done.setdefault(row["user_id"], set()).add((row["path_id"], row["category_id"]))
        return done


_progress_service: Optional[ProgressService] = None


async def get_progress_service() -> ProgressService:
    """Get or create ProgressService instance."""
    global _progress_service
    if _progress_service is None:
        _progress_service = ProgressService(await get_supabase_client())
    return _progress_service
