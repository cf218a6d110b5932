"""
Authentication routes.
"""

from fastapi import APIRouter, HTTPException, status

from postguard.api.dependencies.auth import AppContainer
from postguard.core.container import Container
from postguard.repositories.users import UsernameTaken
from postguard.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from postguard.services.auth import IssuedToken

router = APIRouter()


def token_response(
    issued: IssuedToken,
    container: Container,
    message: str | None = None,
) -> TokenResponse:
    user = issued.user
    return TokenResponse(
        token=issued.access_token,
        role=user.role.value,
        user_id=user.id,
        username=user.username,
        permissions=sorted(container.matrix.permissions_for(user.role)),
        message=message,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, container: AppContainer):
    """Register a new user. Role defaults to VIEWER; unknown roles are rejected."""
    try:
        issued = await container.auth_service.register(
            username=data.username,
            password=data.password,
            email=data.email,
            role=data.role,
        )
    except UsernameTaken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists.",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return token_response(issued, container)


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, container: AppContainer):
    """Exchange username/password for an access token."""
    issued = await container.auth_service.login(data.username, data.password)
    user = issued.user
    return token_response(
        issued,
        container,
        message=f"Welcome, {user.username} ({user.role.value})!",
    )
