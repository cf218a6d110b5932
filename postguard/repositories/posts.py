"""
Post store.
"""

from postguard.models.post import Post
from postguard.utils.timezone import utc_now

from .base import MemoryRepository


class PostStore(MemoryRepository[Post]):
    """In-memory post table."""

    resource_kind = "posts"

    async def create(
        self,
        title: str,
        content: str,
        author_id: int,
        author: str,
    ) -> Post:
        post = Post(
            id=self._next_id(),
            title=title,
            content=content,
            author_id=author_id,
            author=author,
        )
        return await self._insert(post)

    async def update(
        self,
        post_id: int,
        title: str | None = None,
        content: str | None = None,
    ) -> Post:
        """
        Update title/content. Empty values keep the current field.

        Raises:
            ResourceNotFound: If the post does not exist
        """
        changes = {"updated_at": utc_now()}
        if title:
            changes["title"] = title
        if content:
            changes["content"] = content
        return await self._update(post_id, **changes)
