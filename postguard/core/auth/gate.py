"""
Authorization gate.

Pure decision function over the permission matrix. It performs no I/O,
no logging and no resource lookups; auditing and store access are the
caller's job (see AuthorizationService).

Usage:
    gate = AuthorizationGate(PermissionMatrix.default())
    decision = gate.decide(identity.role, "posts", "update", ownership_capable=True)
    if decision.ownership_check_required:
        ...  # fetch the post, then OwnershipResolver.resolve(...)
"""

from typing import Any

from .interfaces import Decision
from .matrix import PermissionMatrix
from .roles import Role, permission_string


class AuthorizationGate:
    """
    Evaluates role grants for a (resource, action) pair.

    Logic:
    1. Unrecognised role -> deny, flagged as configuration fault
    2. Unconditional grant -> allow
    3. Ownership-capable request with a self-scoped grant -> allow pending
       ownership check
    4. Otherwise -> deny
    """

    def __init__(self, matrix: PermissionMatrix):
        self.matrix = matrix

    def decide(
        self,
        role: Any,
        resource_kind: Any,
        action: Any,
        ownership_capable: bool = False,
    ) -> Decision:
        if not Role.is_valid(role):
            return Decision.invalid_role(role)

        permission = permission_string(resource_kind, action)

        if self.matrix.allows(role, resource_kind, action):
            return Decision.allow(f"Has permission: {permission}")

        if ownership_capable and self.matrix.allows_self_scoped(role, resource_kind, action):
            return Decision.allow_if_owner(f"Has permission on own records: {permission}")

        return Decision.deny(f"Missing permission: {permission}")
