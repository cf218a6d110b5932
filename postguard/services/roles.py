"""
Role mutation.

Changing a user's role is the one privileged write in the service. It is
serialized per user record and audited exactly once per success.

Usage:
    coordinator = RoleMutationCoordinator(users, gate, audit_sink)
    change = await coordinator.change_role(user_id, "VIEWER", admin_identity)
    change.previous_role  # Role.EDITOR
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import structlog

from postguard.core.auth.audit import AuditEvent, safe_record
from postguard.core.auth.exceptions import AuthorizationDenied, ConfigurationFault
from postguard.core.auth.gate import AuthorizationGate
from postguard.core.auth.interfaces import AuditSink, IdentityClaim
from postguard.core.auth.roles import Action, Resource, Role, permission_string
from postguard.repositories.users import UserRepository

logger = structlog.get_logger()

MANAGE_ROLES = permission_string(Resource.ADMIN, Action.MANAGE_ROLES)


@dataclass(frozen=True)
class RoleChange:
    """Outcome of a successful role mutation."""
    user_id: int
    username: str
    previous_role: Role
    new_role: Role


class RoleMutationCoordinator:
    """
    Serializes role changes per user.

    Each user ID gets its own asyncio.Lock, so changes to the same user
    are applied one at a time in arrival order (asyncio locks are FIFO)
    while changes to different users never wait on each other.

    Precondition checks run before the lock is taken:
    1. The target role must be in the closed set
    2. The acting identity must hold admin:manage_roles
    """

    def __init__(
        self,
        users: UserRepository,
        gate: AuthorizationGate,
        audit_sink: AuditSink | None = None,
    ):
        self.users = users
        self.gate = gate
        self.audit_sink = audit_sink
        self._locks: dict[int, asyncio.Lock] = {}

    def _lock_for(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks.setdefault(user_id, asyncio.Lock())
        return lock

    async def change_role(
        self,
        user_id: int,
        new_role: Any,
        acting_identity: IdentityClaim,
    ) -> RoleChange:
        """
        Change a user's role.

        Raises:
            InvalidRoleValue: Target role not recognised (no state change)
            ConfigurationFault: Acting identity has an unrecognised role
            AuthorizationDenied: Acting identity lacks admin:manage_roles
            ResourceNotFound: No such user
        """
        role = Role.parse(new_role)

        decision = self.gate.decide(acting_identity.role, Resource.ADMIN, Action.MANAGE_ROLES)
        if decision.configuration_fault:
            safe_record(
                self.audit_sink,
                AuditEvent.configuration_fault(acting_identity, MANAGE_ROLES),
            )
            raise ConfigurationFault(acting_identity.role_value)
        if not decision.allowed:
            safe_record(
                self.audit_sink,
                AuditEvent.denied(acting_identity, MANAGE_ROLES, decision.reason),
            )
            raise AuthorizationDenied(MANAGE_ROLES)

        async with self._lock_for(user_id):
            current = await self.users.fetch(Resource.USERS.value, user_id)
            updated = await self.users.set_role(user_id, role)
            change = RoleChange(
                user_id=updated.id,
                username=updated.username,
                previous_role=current.role,
                new_role=updated.role,
            )
            # Audit order follows write order
            safe_record(
                self.audit_sink,
                AuditEvent.role_changed(
                    acting_identity,
                    target_user_id=user_id,
                    previous_role=change.previous_role.value,
                    new_role=change.new_role.value,
                ),
            )

        logger.info(
            "Role changed",
            user_id=user_id,
            actor_id=acting_identity.id,
            previous_role=change.previous_role.value,
            new_role=change.new_role.value,
        )

        return change
