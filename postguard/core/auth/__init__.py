"""
Authorization module - Role-based access control for the posts/users API.

Pieces, leaves first:
- PermissionMatrix: fixed role -> resource -> actions table, including
  ownership-conditional ``self_`` keys
- AuthorizationGate: pure allow/deny decision, flags grants that still need
  an ownership check
- OwnershipResolver: finalizes conditional grants against a record
- AuthorizationService: runs gate and resolver, audits denials, raises
  typed errors
- Audit sinks: structured log stream, in-memory log, fan-out

Usage:
=====

Guarding a route:
    from postguard.api.dependencies.auth import AppContainer, AuthContext, require_permission

    @router.delete("/posts/{post_id}")
    async def delete_post(
        post_id: int,
        container: AppContainer,
        ctx: AuthContext = Depends(require_permission("posts", "delete", ownership_capable=True)),
    ):
        post = await container.posts.fetch("posts", post_id)
        container.authorization.enforce_ownership(ctx.decision, post, ctx.identity, "posts", "delete")
        ...

Deciding without HTTP:
    gate = AuthorizationGate(PermissionMatrix.default())
    decision = gate.decide(Role.EDITOR, "posts", "update", ownership_capable=True)
    OwnershipResolver().resolve(decision, post.owner_id, identity.id)
"""

# Vocabulary
from .roles import Role, Resource, Action, permission_string

# Errors
from .exceptions import (
    AuthError,
    AuthenticationFailure,
    ConfigurationFault,
    AuthorizationDenied,
    ResourceNotFound,
    InvalidRoleValue,
)

# Core interfaces and values
from .interfaces import (
    IdentityClaim,
    Decision,
    ResourceRecord,
    ResourceStore,
    IdentityVerifier,
    AuditSink,
)

# Decision core
from .matrix import PermissionMatrix
from .gate import AuthorizationGate
from .ownership import OwnershipResolver

# Audit
from .audit import (
    AuditEvent,
    AuditOutcome,
    LogAuditSink,
    MemoryAuditSink,
    CompositeAuditSink,
    safe_record,
)

# Service (main facade)
from .service import AuthorizationService

__all__ = [
    # Vocabulary
    "Role",
    "Resource",
    "Action",
    "permission_string",
    # Errors
    "AuthError",
    "AuthenticationFailure",
    "ConfigurationFault",
    "AuthorizationDenied",
    "ResourceNotFound",
    "InvalidRoleValue",
    # Interfaces
    "IdentityClaim",
    "Decision",
    "ResourceRecord",
    "ResourceStore",
    "IdentityVerifier",
    "AuditSink",
    # Core
    "PermissionMatrix",
    "AuthorizationGate",
    "OwnershipResolver",
    "AuthorizationService",
    # Audit
    "AuditEvent",
    "AuditOutcome",
    "LogAuditSink",
    "MemoryAuditSink",
    "CompositeAuditSink",
    "safe_record",
]
