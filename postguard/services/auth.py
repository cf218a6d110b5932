"""
Authentication service.

Credential handling lives here, outside the authorization core: password
hashing, token issuance and token verification. The core only ever sees
the IdentityClaim that JWTIdentityVerifier produces.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from postguard.core.auth.exceptions import AuthenticationFailure
from postguard.core.auth.interfaces import IdentityClaim, IdentityVerifier
from postguard.core.auth.roles import Role
from postguard.core.config import AuthSettings
from postguard.models.user import User
from postguard.repositories.users import UserRepository
from postguard.utils.timezone import utc_now

logger = structlog.get_logger()


@dataclass
class IssuedToken:
    """Signed access token and the user it was issued to."""
    access_token: str
    user: User
    expires_at: datetime


class JWTIdentityVerifier(IdentityVerifier):
    """
    Signs and verifies HS256 access tokens.

    Claims: sub (user ID), role, username, exp.
    """

    def __init__(self, auth_settings: AuthSettings):
        self.secret_key = auth_settings.secret_key
        self.algorithm = auth_settings.algorithm
        self.expire_minutes = auth_settings.access_token_expire_minutes

    def issue(self, user: User) -> IssuedToken:
        """Create JWT access token."""
        expire = utc_now() + timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "username": user.username,
            "exp": expire,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return IssuedToken(access_token=token, user=user, expires_at=expire)

    def verify(self, token: str | None) -> IdentityClaim:
        if not token:
            raise AuthenticationFailure("Access Denied. No token provided.")

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.info("JWT verification failed", error=str(exc))
            raise AuthenticationFailure("Invalid token.")

        sub = payload.get("sub")
        role = payload.get("role")
        if sub is None or role is None:
            raise AuthenticationFailure("Invalid token.")

        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise AuthenticationFailure("Invalid token.")

        return IdentityClaim(
            id=user_id,
            # Kept raw: an unknown role is a configuration fault, not a 401
            role=Role(role) if Role.is_valid(role) else role,
            display_name=payload.get("username") or str(user_id),
        )


class AuthService:
    """Registration and login."""

    def __init__(
        self,
        users: UserRepository,
        verifier: JWTIdentityVerifier,
        auth_settings: AuthSettings,
    ):
        self.users = users
        self.verifier = verifier
        self.password_min_length = auth_settings.password_min_length
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=auth_settings.bcrypt_rounds,
        )

    def hash_password(self, password: str) -> str:
        """Hash a password."""
        return self.pwd_context.hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        """Verify password against hash."""
        return self.pwd_context.verify(plain, hashed)

    async def register(
        self,
        username: str,
        password: str,
        email: str | None = None,
        role: str | None = None,
    ) -> IssuedToken:
        """
        Register a new user.

        The role defaults to VIEWER. A supplied role must be one of the
        closed set; it is never coerced.

        Raises:
            InvalidRoleValue: If role is not recognised
            ValueError: If the password is too short
            UsernameTaken: If the username exists
        """
        new_role = Role.parse(role) if role is not None else Role.VIEWER

        if len(password) < self.password_min_length:
            raise ValueError(
                f"Password must be at least {self.password_min_length} characters."
            )

        user = await self.users.create(
            username=username,
            password_hash=self.hash_password(password),
            role=new_role,
            email=email,
        )
        logger.info("User registered", user_id=user.id, role=user.role.value)

        return self.verifier.issue(user)

    async def login(self, username: str, password: str) -> IssuedToken:
        """
        Authenticate user and return a token.

        Raises:
            AuthenticationFailure: If the credentials do not match
        """
        user = await self.users.get_by_username(username)

        if not user or not self.verify_password(password, user.password_hash):
            logger.info("Login failed", username=username)
            raise AuthenticationFailure("Invalid username or password.")

        user = await self.users.touch_login(user.id)
        logger.info("User logged in", user_id=user.id, role=user.role.value)

        return self.verifier.issue(user)
