"""
FastAPI dependencies for authorization.

Usage:
    from postguard.api.dependencies.auth import AppContainer, AuthContext, require_permission

    @router.put("/posts/{post_id}")
    async def handler(
        post_id: int,
        ctx: AuthContext = Depends(require_permission("posts", "update", ownership_capable=True)),
    ):
        ...
"""

from dataclasses import dataclass
from typing import Annotated, Any, Callable

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from postguard.core.auth.interfaces import Decision, IdentityClaim
from postguard.core.container import Container
from postguard.utils.context import set_context_user


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Verified identity plus the gate decision that let the request through."""
    identity: IdentityClaim
    decision: Decision


# ============================================================
# CONTAINER
# ============================================================

def get_container(request: Request) -> Container:
    """Container of the running application."""
    return request.app.state.container


# ============================================================
# IDENTITY
# ============================================================

async def get_current_identity(
    token: str | None = Depends(oauth2_scheme),
    container: Container = Depends(get_container),
) -> IdentityClaim:
    """
    Verify the bearer token.

    Raises:
        AuthenticationFailure: 401 if missing or invalid
    """
    identity = container.verifier.verify(token)
    set_context_user(str(identity.id), identity.role_value)
    return identity


# ============================================================
# PERMISSION GUARD
# ============================================================

def require_permission(
    resource_kind: Any,
    action: Any,
    ownership_capable: bool = False,
) -> Callable:
    """
    Dependency factory that runs the gate before the route handler.

    A denial raises here, before the handler can look anything up, so an
    unauthorized caller never learns whether a resource exists. When the
    returned decision requires an ownership check, the handler must call
    AuthorizationService.enforce_ownership on the fetched record before
    changing it.

    Usage:
    ```python
    @router.post("/posts")
    async def create_post(
        ctx: AuthContext = Depends(require_permission("posts", "create")),
    ):
        ...
    ```
    """

    async def check_permission(
        identity: IdentityClaim = Depends(get_current_identity),
        container: Container = Depends(get_container),
    ) -> AuthContext:
        decision = container.authorization.authorize(
            identity,
            resource_kind,
            action,
            ownership_capable=ownership_capable,
        )
        return AuthContext(identity=identity, decision=decision)

    return check_permission


# ============================================================
# TYPE ALIASES FOR CLEAN SIGNATURES
# ============================================================

# Application container
AppContainer = Annotated[Container, Depends(get_container)]
