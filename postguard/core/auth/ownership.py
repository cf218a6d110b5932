"""
Ownership resolution for self-scoped grants.

Finalizes a gate decision against a concrete record. Only decisions that
carry ``ownership_check_required`` depend on the record at all.
"""

from typing import Any

from .interfaces import Decision


class OwnershipResolver:
    """
    Row-level check for conditional grants.

    Rules:
    - denied decisions stay denied
    - unconditional grants are already final
    - conditional grants pass only when the record's owner is the caller
    """

    def resolve(
        self,
        decision: Decision,
        resource_owner_id: Any,
        identity_id: Any,
    ) -> bool:
        if not decision.allowed:
            return False

        if not decision.ownership_check_required:
            return decision.allowed

        return resource_owner_id is not None and resource_owner_id == identity_id
