"""
Repositories - injected stores for users and posts.
"""

from .base import MemoryRepository
from .users import UserRepository, UsernameTaken
from .posts import PostStore

__all__ = [
    "MemoryRepository",
    "UserRepository",
    "UsernameTaken",
    "PostStore",
]
