"""Audit log schemas."""

from datetime import datetime
from typing import Any, Optional

from .base import APIModel


class AuditLogResponse(APIModel):
    """Schema for audit event response."""

    outcome: str
    actor_id: Any
    actor_role: str
    required_permission: str
    correlation_id: str
    timestamp: datetime
    target_user_id: Optional[Any] = None
    previous_role: Optional[str] = None
    new_role: Optional[str] = None
    detail: Optional[str] = None


class AuditLogListResponse(APIModel):
    """Page of audit events, newest first."""

    items: list[AuditLogResponse]
    total: int
    limit: int
    offset: int
