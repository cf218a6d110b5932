"""
Pytest fixtures for testing.

Provides:
- Settings tuned for tests (fast bcrypt, no startup seeding)
- A fresh container per test, seeded with the demo users and posts
- Test client with auth helpers
"""

from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt

from postguard.core.auth.audit import MemoryAuditSink
from postguard.core.auth.gate import AuthorizationGate
from postguard.core.auth.interfaces import IdentityClaim
from postguard.core.auth.matrix import PermissionMatrix
from postguard.core.auth.roles import Role
from postguard.core.config import AuthSettings, Settings
from postguard.core.container import Container
from postguard.main import create_app
from postguard.services.seed import seed_demo_data


TEST_SECRET = "test-secret-key"

# Seeded IDs (allocated in seeding order)
ADMIN_ID, EDITOR1_ID, EDITOR2_ID, VIEWER_ID = 1, 2, 3, 4
ADMIN_POST_ID, EDITOR1_POST_ID, EDITOR2_POST_ID, EDITOR1_SECOND_POST_ID = 1, 2, 3, 4


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="testing",
        seed_demo_data=False,
        log_format="text",
        auth=AuthSettings(secret_key=TEST_SECRET, bcrypt_rounds=4),
    )


@pytest.fixture
def matrix() -> PermissionMatrix:
    return PermissionMatrix.default()


@pytest.fixture
def gate(matrix: PermissionMatrix) -> AuthorizationGate:
    return AuthorizationGate(matrix)


@pytest.fixture
def audit_sink() -> MemoryAuditSink:
    return MemoryAuditSink()


@pytest.fixture
def container(settings: Settings) -> Container:
    """Fresh, empty container."""
    return Container.build(settings)


@pytest_asyncio.fixture
async def seeded(container: Container) -> Container:
    """Container holding the demo users and posts."""
    await seed_demo_data(container.users, container.posts, container.auth_service)
    return container


@pytest_asyncio.fixture
async def client(seeded: Container, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Test client bound to the seeded container."""
    app = create_app(settings, seeded)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============ Identities ============


def make_identity(id: int, role: Role | str, name: str = "someone") -> IdentityClaim:
    return IdentityClaim(id=id, role=role, display_name=name)


@pytest.fixture
def admin_identity() -> IdentityClaim:
    return make_identity(ADMIN_ID, Role.ADMIN, "admin")


@pytest.fixture
def editor_identity() -> IdentityClaim:
    return make_identity(EDITOR1_ID, Role.EDITOR, "editor1")


@pytest.fixture
def viewer_identity() -> IdentityClaim:
    return make_identity(VIEWER_ID, Role.VIEWER, "viewer")


# ============ Auth Helpers ============


HeadersFor = Callable[[str], Awaitable[dict[str, str]]]


@pytest_asyncio.fixture
async def headers_for(seeded: Container) -> HeadersFor:
    """Issue a token for a seeded username without going through bcrypt."""

    async def _headers(username: str) -> dict[str, str]:
        user = await seeded.users.get_by_username(username)
        token = seeded.verifier.issue(user).access_token
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def admin_headers(headers_for: HeadersFor) -> dict[str, str]:
    return await headers_for("admin")


@pytest_asyncio.fixture
async def editor_headers(headers_for: HeadersFor) -> dict[str, str]:
    return await headers_for("editor1")


@pytest_asyncio.fixture
async def viewer_headers(headers_for: HeadersFor) -> dict[str, str]:
    return await headers_for("viewer")


def forged_headers(user_id: int, role: str, username: str = "ghost") -> dict[str, str]:
    """Validly signed token carrying an arbitrary role claim."""
    token = jwt.encode(
        {"sub": str(user_id), "role": role, "username": username},
        TEST_SECRET,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}
