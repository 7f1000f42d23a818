"""
Flotify - Security Dependencies

FastAPI dependencies gating protected routes.

Usage:
    @router.get("/users/{id}")
    def view_user(user: AuthenticatedUser = Depends(authorize_owner)):
        ...

Every protected route is addressed by the owning user's ID in its path.
The bearer token must verify AND belong to that user. Routes read the
identity from AuthenticatedUser.user_id rather than declaring {id}
themselves, which would validate it ahead of the token check.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from flotify.auth.manager import AuthManager
from flotify.errors import AuthError, InvalidIdError, MissingTokenError
from flotify.log import get_logger


logger = get_logger(__name__)

# HTTP Bearer scheme for JWT extraction; errors are raised by us, not FastAPI
security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    """
    Represents a validated, authenticated user.
    
    Available in route handlers via Depends(authorize_owner).
    """
    user_id: UUID
    token_id: Optional[str] = None  # jti for log correlation


def get_auth_manager(request: Request) -> AuthManager:
    return request.app.state.auth_manager


def authorize_owner(
    id: str,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_manager: AuthManager = Depends(get_auth_manager),
) -> AuthenticatedUser:
    """
    Require a valid access token issued to the user named in the path.
    
    1. Read the bearer token from the Authorization header
    2. Resolve the target identity from the {id} path parameter
    3. Verify signature, expiry and identity binding
    
    The token is checked for presence before the path is parsed, so a
    request without credentials is 401 whatever its path. Any failure
    stops the request before the route handler runs.
    
    Raises:
        MissingTokenError: No Authorization header or not a Bearer token
        InvalidIdError: {id} is not a UUID (400)
        InvalidTokenError: Malformed or wrongly signed token
        AccessTokenExpiredError: Token past expiry
        IdentityMismatchError: Token belongs to another user
    """
    if credentials is None:
        logger.info("auth.token.rejected", reason="missing", target_user=id)
        raise MissingTokenError()
    
    try:
        identity = UUID(id)
    except ValueError as e:
        raise InvalidIdError() from e
    
    try:
        claims = auth_manager.verify_access_token(credentials.credentials, identity)
    except AuthError as e:
        logger.info("auth.token.rejected", reason=type(e).__name__, target_user=id)
        raise
    
    user = AuthenticatedUser(user_id=identity, token_id=claims.get("jti"))
    logger.debug("auth.token.accepted", user_id=id, token_id=user.token_id)
    return user
