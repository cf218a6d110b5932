"""
Tests for the permission matrix.
"""

import pytest

from postguard.core.auth.exceptions import InvalidRoleValue
from postguard.core.auth.matrix import PermissionMatrix
from postguard.core.auth.roles import Role


def test_default_unconditional_grants(matrix: PermissionMatrix):
    assert matrix.allows(Role.ADMIN, "posts", "delete")
    assert matrix.allows(Role.ADMIN, "admin", "manage_roles")
    assert matrix.allows(Role.EDITOR, "posts", "create")
    assert matrix.allows(Role.EDITOR, "users", "read")
    assert matrix.allows(Role.VIEWER, "posts", "read")

    assert not matrix.allows(Role.EDITOR, "posts", "update")
    assert not matrix.allows(Role.VIEWER, "posts", "create")
    assert not matrix.allows(Role.VIEWER, "users", "read")
    assert not matrix.allows(Role.EDITOR, "admin", "manage_roles")


def test_self_scoped_key_is_distinct(matrix: PermissionMatrix):
    """self_posts grants are invisible to the unconditional lookup and vice versa."""
    assert matrix.allows_self_scoped(Role.EDITOR, "posts", "update")
    assert matrix.allows_self_scoped(Role.EDITOR, "posts", "delete")
    assert not matrix.allows(Role.EDITOR, "posts", "delete")

    # ADMIN has unconditional grants only
    assert not matrix.allows_self_scoped(Role.ADMIN, "posts", "update")
    assert not matrix.allows_self_scoped(Role.VIEWER, "posts", "update")


def test_unknown_role_has_no_grants(matrix: PermissionMatrix):
    assert not matrix.has_role("SUPERUSER")
    assert not matrix.allows("SUPERUSER", "posts", "read")
    assert not matrix.allows_self_scoped("SUPERUSER", "posts", "update")
    assert matrix.permissions_for("SUPERUSER") == set()


def test_unknown_resource_or_action_is_not_an_error(matrix: PermissionMatrix):
    assert not matrix.allows(Role.ADMIN, "comments", "read")
    assert not matrix.allows(Role.ADMIN, "posts", "publish")
    assert not matrix.allows_self_scoped(Role.EDITOR, "comments", "update")


def test_role_strings_and_enum_members_are_equivalent(matrix: PermissionMatrix):
    assert matrix.allows("EDITOR", "posts", "create")
    assert matrix.allows(Role.EDITOR, "posts", "create")
    assert not matrix.allows("editor", "posts", "create")


def test_permissions_for(matrix: PermissionMatrix):
    assert matrix.permissions_for(Role.VIEWER) == {"posts:read"}
    assert matrix.permissions_for(Role.EDITOR) == {
        "posts:create",
        "posts:read",
        "self_posts:update",
        "self_posts:delete",
        "users:read",
    }


def test_matrix_is_read_only(matrix: PermissionMatrix):
    with pytest.raises(AttributeError):
        matrix._grants = {}

    with pytest.raises(TypeError):
        matrix._grants["VIEWER"]["posts"] = frozenset({"delete"})

    with pytest.raises(AttributeError):
        matrix._grants["VIEWER"]["posts"].add("delete")

    assert not matrix.allows(Role.VIEWER, "posts", "delete")


def test_construction_copies_input():
    grants = {"VIEWER": {"posts": ["read"]}}
    matrix = PermissionMatrix(grants)

    grants["VIEWER"]["posts"].append("delete")

    assert not matrix.allows(Role.VIEWER, "posts", "delete")


@pytest.mark.parametrize(
    "grants",
    [
        {"ADMIN": {"comments": ["read"]}},
        {"ADMIN": {"posts": ["publish"]}},
        {"EDITOR": {"self_posts": ["read"]}},
        {"EDITOR": {"self_users": ["update"]}},
    ],
)
def test_construction_rejects_unknown_vocabulary(grants):
    with pytest.raises(ValueError):
        PermissionMatrix(grants)


def test_construction_rejects_unknown_role():
    with pytest.raises(InvalidRoleValue):
        PermissionMatrix({"SUPERUSER": {"posts": ["read"]}})


def test_self_scoped_key_never_grants_unconditionally(matrix: PermissionMatrix):
    assert not matrix.allows(Role.EDITOR, "self_posts", "update")
