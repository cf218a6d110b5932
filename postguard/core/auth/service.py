"""
Authorization service - Main facade for authorization.

Composes the pure steps (gate, ownership resolver) with the side effects
the gate must not perform itself: auditing and raising typed errors.

Usage:
    # In route handlers:
    ctx = Depends(require_permission("posts", "update", ownership_capable=True))
    post = await posts.fetch("posts", post_id)
    auth.enforce_ownership(ctx.decision, post, ctx.identity, "posts", "update")
"""

from typing import Any

from .audit import AuditEvent, safe_record
from .exceptions import AuthorizationDenied, ConfigurationFault
from .gate import AuthorizationGate
from .interfaces import AuditSink, Decision, IdentityClaim, ResourceRecord
from .ownership import OwnershipResolver
from .roles import permission_string, value_of


class AuthorizationService:
    """
    Default authorization pipeline.

    Combines:
    - Gate: Determines whether the role may act at all
    - Resolver: Finalizes conditional grants against a record
    - Audit sink: Records denials and configuration faults

    A denial always raises before the caller touches the resource store.
    """

    def __init__(
        self,
        gate: AuthorizationGate,
        resolver: OwnershipResolver,
        audit_sink: AuditSink | None = None,
    ):
        self.gate = gate
        self.resolver = resolver
        self.audit_sink = audit_sink

    def authorize(
        self,
        identity: IdentityClaim,
        resource_kind: Any,
        action: Any,
        ownership_capable: bool = False,
    ) -> Decision:
        """
        Run the gate for an identity.

        Returns:
            The allowing Decision (possibly conditional on ownership)

        Raises:
            ConfigurationFault: If the identity's role is not recognised
            AuthorizationDenied: If the role lacks the permission
        """
        permission = permission_string(resource_kind, action)
        decision = self.gate.decide(identity.role, resource_kind, action, ownership_capable)

        if decision.configuration_fault:
            safe_record(self.audit_sink, AuditEvent.configuration_fault(identity, permission))
            raise ConfigurationFault(identity.role_value)

        if not decision.allowed:
            safe_record(self.audit_sink, AuditEvent.denied(identity, permission, decision.reason))
            raise AuthorizationDenied(
                permission,
                f"Forbidden. Role '{identity.role_value}' cannot perform "
                f"'{value_of(action)}' on '{value_of(resource_kind)}'.",
            )

        return decision

    def enforce_ownership(
        self,
        decision: Decision,
        record: ResourceRecord,
        identity: IdentityClaim,
        resource_kind: Any,
        action: Any,
    ) -> None:
        """
        Finalize a decision against the fetched record.

        Raises:
            AuthorizationDenied: If a conditional grant does not match the owner
        """
        if self.resolver.resolve(decision, record.owner_id, identity.id):
            return

        permission = permission_string(resource_kind, action)
        safe_record(
            self.audit_sink,
            AuditEvent.denied(
                identity,
                permission,
                f"Ownership mismatch: owner {record.owner_id}",
            ),
        )
        raise AuthorizationDenied(
            permission,
            f"Forbidden. You can only {value_of(action)} your own {value_of(resource_kind)}.",
        )

    def can(
        self,
        identity: IdentityClaim,
        resource_kind: Any,
        action: Any,
        record: ResourceRecord | None = None,
    ) -> bool:
        """
        Check if an action is allowed (returns bool, records nothing).

        Without a record, a conditional grant counts as not allowed.
        """
        decision = self.gate.decide(
            identity.role,
            resource_kind,
            action,
            ownership_capable=record is not None,
        )
        if not decision.allowed:
            return False
        if decision.ownership_check_required:
            return self.resolver.resolve(decision, record.owner_id, identity.id)
        return True
