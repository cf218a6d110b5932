"""
Demo data seeding.

Creates the four demo accounts and a handful of posts:
    admin / admin123        ADMIN
    editor1 / editor123     EDITOR
    editor2 / editor123     EDITOR
    viewer / viewer123      VIEWER
"""

import structlog

from postguard.core.auth.roles import Role
from postguard.repositories.posts import PostStore
from postguard.repositories.users import UserRepository
from postguard.services.auth import AuthService

logger = structlog.get_logger()

DEMO_USERS: list[tuple[str, str, Role]] = [
    ("admin", "admin123", Role.ADMIN),
    ("editor1", "editor123", Role.EDITOR),
    ("editor2", "editor123", Role.EDITOR),
    ("viewer", "viewer123", Role.VIEWER),
]

DEMO_POSTS: list[tuple[str, str, str]] = [
    ("Admin Global News", "This is global content.", "admin"),
    ("Editor 1 Private Draft", "Content only Editor 1 can modify.", "editor1"),
    ("Editor 2 Public Article", "A public facing article by Editor 2.", "editor2"),
    ("General Info for Viewers", "Everyone can read this.", "editor1"),
]


async def seed_demo_data(
    users: UserRepository,
    posts: PostStore,
    auth_service: AuthService,
) -> None:
    """Seed demo users and posts. Does nothing if users already exist."""
    if await users.count():
        return

    by_name = {}
    for username, password, role in DEMO_USERS:
        by_name[username] = await users.create(
            username=username,
            password_hash=auth_service.hash_password(password),
            role=role,
        )

    for title, content, author in DEMO_POSTS:
        user = by_name[author]
        await posts.create(
            title=title,
            content=content,
            author_id=user.id,
            author=user.username,
        )

    logger.info(
        "Database seeded",
        users=await users.count(),
        posts=await posts.count(),
    )
