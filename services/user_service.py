"""
User service.

Identities are created through the Supabase Auth admin API (the
identity provider). The profile row in the users table is written by a
database trigger from the identity's user_metadata, so this service
passes name, username, role and branch_id as metadata and only reads or
edits the users table afterwards.
"""

from typing import Optional
import structlog
from supabase import AsyncClient

from config import get_supabase_client, get_admin_client, settings
from models.user import UserRole, UserCreate, UserUpdate, UserResponse
from exceptions import (
    UserNotFoundError,
    BranchNotFoundError,
    InvalidBranchAssignmentError,
    IdentityProviderError,
    DatabaseError,
)

logger = structlog.get_logger(__name__)


def build_login_email(username: str, domain: Optional[str] = None) -> str:
    """
    Derive the identity provider login from a username.

    "alice" -> "alice@training.local"; usernames already containing
    "@" are used as-is.
    """
    username = username.strip()
    if "@" in username:
        return username
    return f"{username}@{domain or settings.login_email_domain}"


class UserService:
    """
    User business logic.

    Args:
        db: Client for the users and branches tables
        admin: Service-role client for the auth admin API (None when
            SUPABASE_SERVICE_KEY is not configured)
    """

    def __init__(self, db: AsyncClient, admin: Optional[AsyncClient] = None):
        self.db = db
        self.admin = admin
        self.table = "users"

    # ===================
    # READ OPERATIONS
    # ===================

    async def get_all(
        self,
        role: Optional[UserRole] = None,
        branch_id: Optional[str] = None
    ) -> list[UserResponse]:
        """Get users, optionally filtered by role and/or branch."""
        logger.info("getting_users", role=role, branch_id=branch_id)

        try:
            query = self.db.table(self.table).select("*")
            if role:
                query = query.eq("role", role.value)
            if branch_id:
                query = query.eq("branch_id", branch_id)
            result = await query.order("name").execute()
        except Exception as e:
            logger.error("get_users_failed", error=str(e))
            raise DatabaseError("select", str(e))

        return [UserResponse(**row) for row in result.data]

    async def get_by_id(self, user_id: str) -> UserResponse:
        """
        Get a single user profile.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        try:
            result = (
                await self.db.table(self.table)
                .select("*")
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("get_user_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise UserNotFoundError(user_id)
        return UserResponse(**result.data[0])

    # ===================
    # IDENTITY PROVIDER
    # ===================

    async def create_identity(self, login: str, password: str, metadata: dict) -> str:
        """
        Create an identity with profile metadata.

        Args:
            login: Login email
            password: Initial password
            metadata: Profile fields stored as user_metadata

        Returns:
            Identity id

        Raises:
            IdentityProviderError: If the provider is not configured or
                rejects the request (duplicate login, weak password, ...)
        """
        if self.admin is None:
            raise IdentityProviderError(
                "User creation requires SUPABASE_SERVICE_KEY to be configured"
            )

        logger.info("creating_identity", login=login, role=metadata.get("role"))

        try:
            response = await self.admin.auth.admin.create_user({
                "email": login,
                "password": password,
                "email_confirm": True,
                "user_metadata": metadata,
            })
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.warning("create_identity_failed", login=login, error=message)
            raise IdentityProviderError(message, details={"login": login}) from e

        if response is None or response.user is None:
            raise IdentityProviderError("Identity provider returned no user", details={"login": login})

        logger.info("identity_created", login=login, user_id=response.user.id)
        return response.user.id

    # ===================
    # WRITE OPERATIONS
    # ===================

    async def create(self, data: UserCreate) -> UserResponse:
        """
        Create a user through the identity provider.

        Raises:
            InvalidBranchAssignmentError: If branch_id doesn't fit the role
            BranchNotFoundError: If branch_id doesn't exist
            IdentityProviderError: If the provider rejects the user
        """
        await self._check_branch_assignment(data.role, data.branch_id)

        metadata = {
            "name": data.name,
            "username": data.username,
            "role": data.role.value,
            "branch_id": data.branch_id,
        }
        user_id = await self.create_identity(
            build_login_email(data.username),
            data.password,
            metadata
        )
        return UserResponse(id=user_id, **metadata)

    async def update(self, user_id: str, data: UserUpdate) -> UserResponse:
        """
        Update provided profile fields.

        The role/branch rule is checked against the merged profile.

        Raises:
            UserNotFoundError: If user doesn't exist
            InvalidBranchAssignmentError: If the result breaks the role rule
        """
        current = await self.get_by_id(user_id)
        update_data = data.model_dump(exclude_unset=True, mode="json")
        if not update_data:
            return current

        role = UserRole(update_data.get("role", current.role.value))
        branch_id = update_data.get("branch_id", current.branch_id)
        if not role.requires_branch and "branch_id" not in update_data:
            # Promoting to admin drops the branch
            branch_id = None
            update_data["branch_id"] = None
        await self._check_branch_assignment(role, branch_id)

        logger.info("updating_user", user_id=user_id, fields=list(update_data.keys()))

        try:
            result = (
                await self.db.table(self.table)
                .update(update_data)
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_user_failed", user_id=user_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise UserNotFoundError(user_id)
        return UserResponse(**result.data[0])

    async def delete(self, user_id: str) -> None:
        """
        Delete a user profile.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        logger.info("deleting_user", user_id=user_id)

        try:
            result = (
                await self.db.table(self.table)
                .delete()
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_user_failed", user_id=user_id, error=str(e))
            raise DatabaseError("delete", str(e))

        if not result.data:
            raise UserNotFoundError(user_id)

    async def _check_branch_assignment(self, role: UserRole, branch_id: Optional[str]) -> None:
        if role.requires_branch != bool(branch_id):
            raise InvalidBranchAssignmentError(role.value, branch_id)
        if not branch_id:
            return

        try:
            result = (
                await self.db.table("branches")
                .select("id")
                .eq("id", branch_id)
                .execute()
            )
        except Exception as e:
            logger.error("check_branch_failed", branch_id=branch_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise BranchNotFoundError(branch_id)


_user_service: Optional[UserService] = None


async def get_user_service() -> UserService:
    """Get or create UserService instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService(
            await get_supabase_client(),
            await get_admin_client()
        )
    return _user_service
