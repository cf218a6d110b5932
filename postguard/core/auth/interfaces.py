"""
Authorization interfaces - Core abstractions.

These define the values the decision core passes around and the contracts
of the collaborators it consumes. Route handlers and services depend on
these, never on a concrete verifier, store or audit backend.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .roles import Role


# ============================================================
# IDENTITY
# ============================================================

@dataclass(frozen=True)
class IdentityClaim:
    """
    Authenticated principal for a single request.

    The role is kept as received from the verifier. A value outside the
    closed role set is not rejected here; the gate denies it and the caller
    reports it as a configuration fault.
    """
    id: int
    role: Role | str
    display_name: str

    @property
    def role_value(self) -> str:
        return self.role.value if isinstance(self.role, Role) else str(self.role)


# ============================================================
# DECISION
# ============================================================

@dataclass(frozen=True)
class Decision:
    """
    Result of a gate evaluation.

    Attributes:
        allowed: Whether the action is permitted (possibly conditionally)
        ownership_check_required: Grant is conditional on owning the resource
        configuration_fault: Denied because the role is not recognised
        reason: Human-readable explanation (for errors/logging)
    """
    allowed: bool
    ownership_check_required: bool = False
    configuration_fault: bool = False
    reason: str | None = None

    @classmethod
    def allow(cls, reason: str | None = None) -> "Decision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def allow_if_owner(cls, reason: str | None = None) -> "Decision":
        return cls(allowed=True, ownership_check_required=True, reason=reason)

    @classmethod
    def deny(cls, reason: str = "Permission denied") -> "Decision":
        return cls(allowed=False, reason=reason)

    @classmethod
    def invalid_role(cls, role: Any) -> "Decision":
        return cls(
            allowed=False,
            configuration_fault=True,
            reason=f"Unrecognised role: {role!r}",
        )


# ============================================================
# RESOURCES
# ============================================================

@runtime_checkable
class ResourceRecord(Protocol):
    """Any protected entity. owner_id is None when ownership does not apply."""

    @property
    def owner_id(self) -> int | None: ...


class ResourceStore(ABC):
    """Store the caller consults after the gate allows an action."""

    @abstractmethod
    async def fetch(self, resource_kind: str, resource_id: int) -> ResourceRecord:
        """
        Fetch a record by kind and ID.

        Raises:
            ResourceNotFound: If no such record exists
        """
        pass


# ============================================================
# IDENTITY VERIFIER
# ============================================================

class IdentityVerifier(ABC):
    """
    Turns a credential token into an IdentityClaim.

    The core makes no assumption about the token format.
    """

    @abstractmethod
    def verify(self, token: str | None) -> IdentityClaim:
        """
        Verify a credential.

        Raises:
            AuthenticationFailure: If the token is missing, invalid or expired
        """
        pass


# ============================================================
# AUDIT SINK
# ============================================================

class AuditSink(ABC):
    """
    Destination for audit events.

    record() is best-effort. Callers go through safe_record() so that a
    failing sink never changes an authorization outcome.
    """

    @abstractmethod
    def record(self, event: Any) -> None:
        pass
