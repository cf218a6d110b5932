"""Record types held by the in-memory stores."""

from .user import User
from .post import Post

__all__ = ["User", "Post"]
