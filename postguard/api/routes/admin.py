"""
Administration routes.
"""

from fastapi import APIRouter, Depends, Query

from postguard.api.dependencies.auth import AppContainer, AuthContext, require_permission
from postguard.schemas.audit_log import AuditLogListResponse, AuditLogResponse
from postguard.schemas.user import RoleUpdateRequest, RoleUpdateResponse, UserResponse

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    container: AppContainer,
    _: AuthContext = Depends(require_permission("users", "read")),
):
    """List users (ADMIN and EDITOR)."""
    return [UserResponse.from_user(u) for u in await container.users.list()]


@router.put("/users/{user_id}/role", response_model=RoleUpdateResponse)
async def change_user_role(
    user_id: int,
    data: RoleUpdateRequest,
    container: AppContainer,
    ctx: AuthContext = Depends(require_permission("admin", "manage_roles")),
):
    """Change a user's role. 400 for an unknown role, 404 for an unknown user."""
    change = await container.roles.change_role(user_id, data.new_role, ctx.identity)

    return RoleUpdateResponse(
        message=f"Role updated to {change.new_role.value} for user {change.username}.",
        user_id=change.user_id,
        username=change.username,
        previous_role=change.previous_role.value,
        new_role=change.new_role.value,
    )


@router.get("/audit-logs", response_model=AuditLogListResponse)
async def list_audit_logs(
    container: AppContainer,
    _: AuthContext = Depends(require_permission("admin", "manage_roles")),
    outcome: str | None = Query(None, description="denied, configuration_fault or role_changed"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """Recorded audit events, newest first."""
    audit_log = container.audit_log
    total = len([e for e in audit_log.events if outcome is None or e.outcome == outcome])
    events = audit_log.list(outcome=outcome, limit=limit, offset=offset)

    return AuditLogListResponse(
        items=[AuditLogResponse.model_validate(e.to_dict()) for e in events],
        total=total,
        limit=limit,
        offset=offset,
    )
