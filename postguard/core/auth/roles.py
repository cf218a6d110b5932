"""
Closed authorization vocabulary.

Roles, resources and actions are fixed sets. Anything outside them is
rejected at the boundary instead of being coerced to a default.
"""

from enum import Enum
from typing import Any

from .exceptions import InvalidRoleValue


# Prefix marking an ownership-conditional grant ("self_posts" -> "posts")
SELF_SCOPE_PREFIX = "self_"


class Role(str, Enum):
    """Roles a user can hold."""

    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        """Check membership without raising."""
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in cls._value2member_map_

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """
        Convert a raw value to a Role.

        Raises:
            InvalidRoleValue: If the value is not one of the closed set
        """
        if not cls.is_valid(value):
            raise InvalidRoleValue(value)
        return cls(value)


class Resource(str, Enum):
    """Protected resource kinds."""

    POSTS = "posts"
    USERS = "users"
    ADMIN = "admin"


class Action(str, Enum):
    """Actions that can be granted on a resource."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE_ROLES = "manage_roles"


# Only these (resource, action) pairs may be granted on an ownership basis
SELF_SCOPED_GRANTS: frozenset[tuple[str, str]] = frozenset({
    (Resource.POSTS.value, Action.UPDATE.value),
    (Resource.POSTS.value, Action.DELETE.value),
})


def self_scoped_key(resource_kind: str) -> str:
    """Lookup key for the ownership-conditional variant of a resource."""
    return f"{SELF_SCOPE_PREFIX}{resource_kind}"


def permission_string(resource_kind: str, action: str) -> str:
    """Format a permission as 'resource:action'."""
    return f"{value_of(resource_kind)}:{value_of(action)}"


def value_of(item: Any) -> str:
    """Plain string value of an enum member or raw string."""
    return item.value if isinstance(item, Enum) else str(item)
