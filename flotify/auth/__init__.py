"""
Flotify - Authentication Package

JWT session auth for the catalog API:
- bcrypt password hashing
- HS512-signed access (15 min) and refresh (7 days) tokens
- One stored refresh token per user, rotated on every login
- Path-owner authorization for protected routes
"""

from flotify.auth.dependencies import AuthenticatedUser, authorize_owner
from flotify.auth.manager import AuthManager, TokenPair
from flotify.auth.tokens import AuthConfig, TokenCodec

__all__ = [
    "AuthConfig",
    "AuthManager",
    "AuthenticatedUser",
    "TokenCodec",
    "TokenPair",
    "authorize_owner",
]
