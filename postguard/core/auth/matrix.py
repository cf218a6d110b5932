"""
Permission matrix.

Static mapping of role -> {resource key -> allowed actions}. Keys prefixed
with ``self_`` are ownership-conditional grants and are only consulted by
``allows_self_scoped``.

The matrix is built once at startup and injected into the gate. It exposes
no mutators and stores its data behind read-only mappings of frozensets.

Usage:
    matrix = PermissionMatrix.default()
    matrix.allows(Role.EDITOR, "posts", "create")            # True
    matrix.allows_self_scoped(Role.EDITOR, "posts", "update")  # True
"""

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .roles import (
    Action,
    Resource,
    Role,
    SELF_SCOPE_PREFIX,
    SELF_SCOPED_GRANTS,
    permission_string,
    self_scoped_key,
    value_of,
)


DEFAULT_PERMISSIONS: dict[Role, dict[str, list[str]]] = {
    Role.ADMIN: {
        "users": ["create", "read", "update", "delete"],
        "posts": ["create", "read", "update", "delete"],
        "admin": ["manage_roles"],
    },
    Role.EDITOR: {
        "posts": ["create", "read"],
        "self_posts": ["update", "delete"],
        "users": ["read"],
    },
    Role.VIEWER: {
        "posts": ["read"],
    },
}


class PermissionMatrix:
    """
    Immutable role/resource/action grant table.

    Unknown roles, resources and actions simply have no grants; lookups
    never raise. Construction validates every entry against the closed
    vocabulary: an unknown role raises InvalidRoleValue, an unknown
    resource or action raises ValueError.
    """

    __slots__ = ("_grants",)

    def __init__(self, grants: Mapping[Any, Mapping[str, Iterable[str]]]):
        table: dict[str, Mapping[str, frozenset[str]]] = {}
        for role, resources in grants.items():
            role_key = Role.parse(role).value
            entries: dict[str, frozenset[str]] = {}
            for resource_key, actions in resources.items():
                actions = frozenset(value_of(a) for a in actions)
                _validate_entry(role_key, resource_key, actions)
                entries[resource_key] = actions
            table[role_key] = MappingProxyType(entries)
        object.__setattr__(self, "_grants", MappingProxyType(table))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("PermissionMatrix is read-only")

    @classmethod
    def default(cls) -> "PermissionMatrix":
        """The posts/users service grant table."""
        return cls(DEFAULT_PERMISSIONS)

    # ============================================================
    # LOOKUPS
    # ============================================================

    def has_role(self, role: Any) -> bool:
        return Role.is_valid(role) and value_of(role) in self._grants

    def allows(self, role: Any, resource_kind: Any, action: Any) -> bool:
        """Unconditional grant lookup."""
        resource_key = value_of(resource_kind)
        if resource_key.startswith(SELF_SCOPE_PREFIX):
            return False
        return self._lookup(role, resource_key, value_of(action))

    def allows_self_scoped(self, role: Any, resource_kind: Any, action: Any) -> bool:
        """Ownership-conditional grant lookup (the ``self_`` key)."""
        return self._lookup(role, self_scoped_key(value_of(resource_kind)), value_of(action))

    def permissions_for(self, role: Any) -> set[str]:
        """
        All permission strings for a role.

        Self-scoped grants are reported with their ``self_`` key, e.g.
        ``self_posts:update``.
        """
        if not self.has_role(role):
            return set()
        return {
            permission_string(resource_key, action)
            for resource_key, actions in self._grants[value_of(role)].items()
            for action in actions
        }

    def _lookup(self, role: Any, resource_key: str, action: str) -> bool:
        if not self.has_role(role):
            return False
        actions = self._grants[value_of(role)].get(resource_key)
        return actions is not None and action in actions

    def __repr__(self) -> str:
        return f"<PermissionMatrix roles={sorted(self._grants)}>"


def _validate_entry(role: str, resource_key: str, actions: frozenset[str]) -> None:
    resources = {r.value for r in Resource}
    known_actions = {a.value for a in Action}

    unknown = actions - known_actions
    if unknown:
        raise ValueError(f"{role}: unknown actions {sorted(unknown)} on '{resource_key}'")

    if resource_key.startswith(SELF_SCOPE_PREFIX):
        base = resource_key[len(SELF_SCOPE_PREFIX):]
        for action in actions:
            if (base, action) not in SELF_SCOPED_GRANTS:
                raise ValueError(
                    f"{role}: '{base}:{action}' cannot be granted on an ownership basis"
                )
    elif resource_key not in resources:
        raise ValueError(f"{role}: unknown resource '{resource_key}'")
