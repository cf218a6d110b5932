"""
Authorization error taxonomy.

Every failure is terminal for the request it belongs to. The HTTP layer
maps each class to a status code through ``status_code``; nothing in the
core retries or recovers.
"""

from typing import Any


class AuthError(Exception):
    """Base class for authentication/authorization failures."""

    status_code: int = 500
    error_code: str = "auth_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "detail": self.detail}


class AuthenticationFailure(AuthError):
    """Missing, invalid or expired credential."""

    status_code = 401
    error_code = "authentication_failed"

    def __init__(self, detail: str = "Access Denied. No valid token provided."):
        super().__init__(detail)


class ConfigurationFault(AuthError):
    """The identity carries a role outside the closed set."""

    status_code = 403
    error_code = "invalid_role_configuration"

    def __init__(self, role: Any):
        super().__init__("Forbidden. Invalid Role Configuration.")
        self.role = role


class AuthorizationDenied(AuthError):
    """Gate or ownership denial, naming the permission that was missing."""

    status_code = 403
    error_code = "forbidden"

    def __init__(self, permission: str, detail: str | None = None):
        super().__init__(detail or f"Forbidden. Missing permission '{permission}'.")
        self.permission = permission

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "permission": self.permission}


class ResourceNotFound(AuthError):
    """The resource does not exist. Only reachable after authorization."""

    status_code = 404
    error_code = "not_found"

    def __init__(self, kind: str, resource_id: Any):
        super().__init__(f"{kind.rstrip('s').capitalize()} not found.")
        self.kind = kind
        self.resource_id = resource_id


class InvalidRoleValue(AuthError):
    """A role assignment targeted a value outside the closed set."""

    status_code = 400
    error_code = "invalid_role"

    def __init__(self, value: Any):
        super().__init__(f"Invalid role provided: {value!r}.")
        self.value = value
