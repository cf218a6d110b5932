"""
User model.
"""

from dataclasses import dataclass, field
from datetime import datetime

from postguard.core.auth.roles import Role
from postguard.utils.timezone import utc_now


@dataclass(frozen=True)
class User:
    """
    User account record.

    Records are immutable; a role change replaces the whole record so a
    concurrent reader sees either the old or the new role, never a mix.
    """

    id: int
    username: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime = field(default_factory=utc_now)
    last_login_at: datetime | None = None

    @property
    def owner_id(self) -> int:
        """A user record is owned by that user."""
        return self.id

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"
