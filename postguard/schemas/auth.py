"""
Authentication schemas.
"""

from pydantic import Field

from .base import APIModel


class RegisterRequest(APIModel):
    """User registration request. Role defaults to VIEWER."""
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)
    email: str | None = Field(None, max_length=255)
    role: str | None = None


class LoginRequest(APIModel):
    """Login request."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(APIModel):
    """Issued token with the identity it carries."""
    token: str
    token_type: str = "bearer"
    role: str
    user_id: int
    username: str
    permissions: list[str] = Field(default_factory=list)
    message: str | None = None
