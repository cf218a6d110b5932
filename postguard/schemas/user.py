"""
User schemas.
"""

from datetime import datetime

from postguard.models.user import User

from .base import APIModel


class UserResponse(APIModel):
    """User response schema. Never includes the password hash."""
    id: int
    username: str
    email: str
    role: str
    created_at: datetime
    last_login_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role.value,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class RoleUpdateRequest(APIModel):
    """Role change request body."""
    new_role: str


class RoleUpdateResponse(APIModel):
    """Role change result, including the previous role for the audit trail."""
    message: str
    user_id: int
    username: str
    previous_role: str
    new_role: str
