"""
Services - authentication, role mutation and demo seeding.
"""

from .auth import AuthService, IssuedToken, JWTIdentityVerifier
from .roles import RoleChange, RoleMutationCoordinator

__all__ = [
    "AuthService",
    "IssuedToken",
    "JWTIdentityVerifier",
    "RoleChange",
    "RoleMutationCoordinator",
]
