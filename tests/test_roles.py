"""
Tests for role mutation.
"""

import asyncio

import pytest
import pytest_asyncio

from postguard.core.auth.audit import AuditOutcome, MemoryAuditSink
from postguard.core.auth.exceptions import (
    AuthorizationDenied,
    ConfigurationFault,
    InvalidRoleValue,
    ResourceNotFound,
)
from postguard.core.auth.gate import AuthorizationGate
from postguard.core.auth.interfaces import IdentityClaim
from postguard.core.auth.roles import Role
from postguard.repositories.users import UserRepository
from postguard.services.roles import RoleMutationCoordinator


class YieldingUserRepository(UserRepository):
    """Suspends on every fetch so concurrent callers interleave."""

    async def fetch(self, resource_kind, resource_id):
        await asyncio.sleep(0)
        return await super().fetch(resource_kind, resource_id)


class GatedUserRepository(UserRepository):
    """Holds fetches for one user until released."""

    def __init__(self, held_user_id: int):
        super().__init__()
        self.held_user_id = held_user_id
        self.release = asyncio.Event()
        self.entered = asyncio.Event()

    async def fetch(self, resource_kind, resource_id):
        if resource_id == self.held_user_id:
            self.entered.set()
            await self.release.wait()
        return await super().fetch(resource_kind, resource_id)


async def add_users(users: UserRepository) -> None:
    await users.create("admin", "x", Role.ADMIN)
    await users.create("editor1", "x", Role.EDITOR)
    await users.create("editor2", "x", Role.EDITOR)


@pytest_asyncio.fixture
async def users() -> UserRepository:
    repo = YieldingUserRepository()
    await add_users(repo)
    return repo


@pytest.fixture
def coordinator(users, gate: AuthorizationGate, audit_sink: MemoryAuditSink):
    return RoleMutationCoordinator(users, gate, audit_sink)


@pytest.mark.asyncio
async def test_change_role(coordinator, users, audit_sink, admin_identity):
    change = await coordinator.change_role(2, "VIEWER", admin_identity)

    assert change.previous_role == Role.EDITOR
    assert change.new_role == Role.VIEWER
    assert change.username == "editor1"
    assert await users.get_role(2) == Role.VIEWER

    [event] = audit_sink.events
    assert event.outcome == AuditOutcome.ROLE_CHANGED
    assert event.actor_id == admin_identity.id
    assert (event.target_user_id, event.previous_role, event.new_role) == (2, "EDITOR", "VIEWER")


@pytest.mark.asyncio
async def test_same_role_is_still_recorded(coordinator, audit_sink, admin_identity):
    change = await coordinator.change_role(2, Role.EDITOR, admin_identity)

    assert change.previous_role == change.new_role == Role.EDITOR
    assert len(audit_sink.events) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["SUPERUSER", "editor", "", None])
async def test_invalid_role_changes_nothing(coordinator, users, audit_sink, admin_identity, value):
    with pytest.raises(InvalidRoleValue):
        await coordinator.change_role(2, value, admin_identity)

    assert await users.get_role(2) == Role.EDITOR
    assert audit_sink.events == []


@pytest.mark.asyncio
async def test_non_admin_is_denied(coordinator, users, audit_sink, editor_identity):
    with pytest.raises(AuthorizationDenied) as exc_info:
        await coordinator.change_role(3, "ADMIN", editor_identity)

    assert exc_info.value.permission == "admin:manage_roles"
    assert await users.get_role(3) == Role.EDITOR

    [event] = audit_sink.events
    assert event.outcome == AuditOutcome.DENIED
    assert event.actor_id == editor_identity.id
    assert event.required_permission == "admin:manage_roles"


@pytest.mark.asyncio
async def test_unrecognised_actor_role_is_configuration_fault(coordinator, users, audit_sink):
    ghost = IdentityClaim(id=1, role="ROOT", display_name="ghost")

    with pytest.raises(ConfigurationFault):
        await coordinator.change_role(2, "VIEWER", ghost)

    assert await users.get_role(2) == Role.EDITOR

    [event] = audit_sink.events
    assert event.outcome == AuditOutcome.CONFIGURATION_FAULT
    assert event.actor_role == "ROOT"
    assert event.required_permission == "admin:manage_roles"


@pytest.mark.asyncio
async def test_missing_user(coordinator, audit_sink, admin_identity):
    with pytest.raises(ResourceNotFound):
        await coordinator.change_role(404, "VIEWER", admin_identity)

    assert audit_sink.events == []


@pytest.mark.asyncio
async def test_same_user_changes_are_serialized(coordinator, users, audit_sink, admin_identity):
    """Each change observes the previous one; none is lost."""
    targets = ["VIEWER", "ADMIN", "EDITOR", "VIEWER", "ADMIN"]

    changes = await asyncio.gather(
        *(coordinator.change_role(2, role, admin_identity) for role in targets)
    )

    # Locks are FIFO, so changes apply in submission order
    assert [c.new_role.value for c in changes] == targets
    assert changes[0].previous_role == Role.EDITOR
    for before, after in zip(changes, changes[1:]):
        assert after.previous_role == before.new_role

    assert await users.get_role(2) == Role.ADMIN

    events = audit_sink.events
    assert len(events) == len(targets)
    assert [e.new_role for e in events] == targets
    assert [e.previous_role for e in events] == ["EDITOR"] + targets[:-1]


@pytest.mark.asyncio
async def test_different_users_do_not_block(gate, audit_sink, admin_identity):
    users = GatedUserRepository(held_user_id=2)
    await add_users(users)
    coordinator = RoleMutationCoordinator(users, gate, audit_sink)

    held = asyncio.create_task(coordinator.change_role(2, "VIEWER", admin_identity))
    await users.entered.wait()

    other = await asyncio.wait_for(
        coordinator.change_role(3, "VIEWER", admin_identity), timeout=1
    )
    assert other.user_id == 3
    assert not held.done()

    users.release.set()
    change = await held
    assert change.new_role == Role.VIEWER
    assert [e.target_user_id for e in audit_sink.events] == [3, 2]
