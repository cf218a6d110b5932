"""
User repository.
"""

from postguard.core.auth.roles import Role
from postguard.models.user import User
from postguard.utils.timezone import utc_now

from .base import MemoryRepository


class UsernameTaken(ValueError):
    """Username already registered."""


class UserRepository(MemoryRepository[User]):
    """In-memory user table."""

    resource_kind = "users"

    async def get_by_username(self, username: str) -> User | None:
        for user in self._records.values():
            if user.username == username:
                return user
        return None

    async def create(
        self,
        username: str,
        password_hash: str,
        role: Role,
        email: str | None = None,
    ) -> User:
        """
        Create a user.

        Raises:
            UsernameTaken: If the username exists
            InvalidRoleValue: If role is outside the closed set
        """
        if await self.get_by_username(username):
            raise UsernameTaken(username)

        user = User(
            id=self._next_id(),
            username=username,
            email=email or f"{username}@example.com",
            password_hash=password_hash,
            role=Role.parse(role),
        )
        return await self._insert(user)

    async def get_role(self, user_id: int) -> Role | None:
        """Current role of a user, read from a single record snapshot."""
        user = self._records.get(user_id)
        return user.role if user else None

    async def set_role(self, user_id: int, role: Role) -> User:
        """
        Replace a user's role.

        Callers that need read-modify-write semantics go through
        RoleMutationCoordinator, which serializes per user.
        """
        return await self._update(user_id, role=Role.parse(role))

    async def touch_login(self, user_id: int) -> User:
        return await self._update(user_id, last_login_at=utc_now())
