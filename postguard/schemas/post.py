"""
Post schemas.
"""

from datetime import datetime

from pydantic import Field

from .base import APIModel


class PostCreate(APIModel):
    """Post creation request."""
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)


class PostUpdate(APIModel):
    """Post update request. Omitted fields keep their value."""
    title: str | None = Field(None, max_length=200)
    content: str | None = None


class PostResponse(APIModel):
    """Post response schema."""
    id: int
    title: str
    content: str
    author: str
    author_id: int
    created_at: datetime
    updated_at: datetime | None = None
