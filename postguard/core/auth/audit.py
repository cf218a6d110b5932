"""
Audit events and sinks.

Events are recorded on every denial, on every configuration fault and on
every successful role change. Recording is best-effort: ``safe_record``
swallows sink failures and logs them locally, so a broken sink can never
turn into an authorization error.

Usage:
    sink = CompositeAuditSink([LogAuditSink(), MemoryAuditSink()])
    safe_record(sink, AuditEvent.denied(identity, "posts:delete"))
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from threading import Lock
from typing import Any, Iterable, Optional

import structlog

from postguard.utils.context import get_correlation_id
from postguard.utils.timezone import to_iso8601, utc_now

from .interfaces import AuditSink, IdentityClaim

logger = structlog.get_logger()


# Standard audit outcomes
class AuditOutcome:
    """Standard audit outcome constants."""

    DENIED = "denied"
    CONFIGURATION_FAULT = "configuration_fault"
    ROLE_CHANGED = "role_changed"


@dataclass(frozen=True)
class AuditEvent:
    """
    Write-once audit record.

    Attributes:
        outcome: One of AuditOutcome
        actor_id: ID of the identity that triggered the event
        actor_role: Role carried by that identity
        required_permission: "resource:action" that was evaluated
        correlation_id: Request correlation ID ("N/A" outside a request)
        timestamp: UTC time of the event
        target_user_id: User whose role changed (role changes only)
        previous_role: Role before the change (role changes only)
        new_role: Role after the change (role changes only)
        detail: Free-form explanation
    """
    outcome: str
    actor_id: Any
    actor_role: str
    required_permission: str
    correlation_id: str = field(default_factory=lambda: get_correlation_id() or "N/A")
    timestamp: datetime = field(default_factory=utc_now)
    target_user_id: Optional[Any] = None
    previous_role: Optional[str] = None
    new_role: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def denied(
        cls,
        identity: IdentityClaim,
        permission: str,
        detail: Optional[str] = None,
    ) -> "AuditEvent":
        return cls(
            outcome=AuditOutcome.DENIED,
            actor_id=identity.id,
            actor_role=identity.role_value,
            required_permission=permission,
            detail=detail,
        )

    @classmethod
    def configuration_fault(cls, identity: IdentityClaim, permission: str) -> "AuditEvent":
        return cls(
            outcome=AuditOutcome.CONFIGURATION_FAULT,
            actor_id=identity.id,
            actor_role=identity.role_value,
            required_permission=permission,
            detail=f"Unrecognised role {identity.role_value!r}",
        )

    @classmethod
    def role_changed(
        cls,
        identity: IdentityClaim,
        target_user_id: Any,
        previous_role: str,
        new_role: str,
    ) -> "AuditEvent":
        return cls(
            outcome=AuditOutcome.ROLE_CHANGED,
            actor_id=identity.id,
            actor_role=identity.role_value,
            required_permission="admin:manage_roles",
            target_user_id=target_user_id,
            previous_role=previous_role,
            new_role=new_role,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = to_iso8601(self.timestamp)
        return data


# ============================================================
# SINKS
# ============================================================

class LogAuditSink(AuditSink):
    """
    Writes audit events to the structured log stream.

    Configuration faults log at error level so operators can spot bad role
    assignments separately from ordinary denials.
    """

    def __init__(self, logger_name: str = "postguard.audit"):
        self.log = structlog.get_logger(logger_name)

    def record(self, event: AuditEvent) -> None:
        payload = event.to_dict()
        # "timestamp" belongs to the log processor
        payload["event_timestamp"] = payload.pop("timestamp")
        if event.outcome == AuditOutcome.CONFIGURATION_FAULT:
            self.log.error("ConfigurationFault", **payload)
        elif event.outcome == AuditOutcome.DENIED:
            self.log.warning("AuthorizationDenied", **payload)
        else:
            self.log.info("RoleChanged", **payload)


class MemoryAuditSink(AuditSink):
    """
    Append-only in-memory event list.

    Backs the admin audit-log endpoint and test assertions. Not shared
    between processes.
    """

    def __init__(self, max_events: int = 10_000):
        self.max_events = max_events
        self._events: list[AuditEvent] = []
        self._lock = Lock()

    def record(self, event: AuditEvent) -> None:
        with self._lock:
            self._events.append(event)
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    @property
    def events(self) -> list[AuditEvent]:
        """Snapshot of recorded events, oldest first."""
        with self._lock:
            return list(self._events)

    def list(
        self,
        outcome: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditEvent]:
        """Newest first, optionally filtered by outcome."""
        events = [
            e for e in reversed(self.events)
            if outcome is None or e.outcome == outcome
        ]
        return events[offset:offset + limit]


class CompositeAuditSink(AuditSink):
    """Fans an event out to several sinks; one failing child does not stop the rest."""

    def __init__(self, sinks: Iterable[AuditSink]):
        self.sinks = list(sinks)

    def record(self, event: AuditEvent) -> None:
        for sink in self.sinks:
            safe_record(sink, event)


def safe_record(sink: AuditSink | None, event: AuditEvent) -> None:
    """
    Record an event without ever raising.

    Sink errors are logged locally and otherwise ignored.
    """
    if sink is None:
        return
    try:
        sink.record(event)
    except Exception as exc:
        logger.error(
            "Audit sink failure",
            sink=type(sink).__name__,
            outcome=event.outcome,
            required_permission=event.required_permission,
            error=str(exc),
        )
