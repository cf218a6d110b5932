"""
Dependency injection container.
Centralizes instantiation of the authorization core and its collaborators.
"""

from dataclasses import dataclass

from postguard.core.auth.audit import CompositeAuditSink, LogAuditSink, MemoryAuditSink
from postguard.core.auth.gate import AuthorizationGate
from postguard.core.auth.interfaces import AuditSink
from postguard.core.auth.matrix import PermissionMatrix
from postguard.core.auth.ownership import OwnershipResolver
from postguard.core.auth.service import AuthorizationService
from postguard.core.config import Settings
from postguard.repositories.posts import PostStore
from postguard.repositories.users import UserRepository
from postguard.services.auth import AuthService, JWTIdentityVerifier
from postguard.services.roles import RoleMutationCoordinator


@dataclass
class Container:
    """
    Holds every long-lived object of one application instance.

    The permission matrix is created here once and shared read-only by the
    gate for the lifetime of the process. Each app gets its own container,
    so tests never share state.

    Example:
    ```python
    container = Container.build(settings)
    app.state.container = container

    decision = container.gate.decide(Role.EDITOR, "posts", "create")
    ```
    """

    settings: Settings
    matrix: PermissionMatrix
    gate: AuthorizationGate
    resolver: OwnershipResolver
    audit_log: MemoryAuditSink
    audit_sink: AuditSink
    users: UserRepository
    posts: PostStore
    verifier: JWTIdentityVerifier
    auth_service: AuthService
    authorization: AuthorizationService
    roles: RoleMutationCoordinator

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        matrix: PermissionMatrix | None = None,
        users: UserRepository | None = None,
        posts: PostStore | None = None,
        audit_sink: AuditSink | None = None,
    ) -> "Container":
        """
        Wire the core.

        Args:
            settings: Application settings
            matrix: Grant table (default: PermissionMatrix.default())
            users: User store (default: empty in-memory store)
            posts: Post store (default: empty in-memory store)
            audit_sink: Extra sink to receive audit events alongside the
                log stream and the in-memory audit log
        """
        matrix = matrix or PermissionMatrix.default()
        gate = AuthorizationGate(matrix)
        resolver = OwnershipResolver()

        audit_log = MemoryAuditSink()
        sinks: list[AuditSink] = [LogAuditSink(), audit_log]
        if audit_sink is not None:
            sinks.append(audit_sink)
        sink = CompositeAuditSink(sinks)

        users = users if users is not None else UserRepository()
        posts = posts if posts is not None else PostStore()
        verifier = JWTIdentityVerifier(settings.auth)

        return cls(
            settings=settings,
            matrix=matrix,
            gate=gate,
            resolver=resolver,
            audit_log=audit_log,
            audit_sink=sink,
            users=users,
            posts=posts,
            verifier=verifier,
            auth_service=AuthService(users, verifier, settings.auth),
            authorization=AuthorizationService(gate, resolver, sink),
            roles=RoleMutationCoordinator(users, gate, sink),
        )
