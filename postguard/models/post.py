"""
Post model.
"""

from dataclasses import dataclass, field
from datetime import datetime

from postguard.utils.timezone import utc_now


@dataclass(frozen=True)
class Post:
    """Post record. The author owns the post."""

    id: int
    title: str
    content: str
    author_id: int
    author: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime | None = None

    @property
    def owner_id(self) -> int:
        return self.author_id

    def __repr__(self) -> str:
        return f"<Post {self.id} by {self.author}>"
