"""
Flotify - Authentication Manager

Orchestrates login, token issuance and token verification.

Verification runs the same steps for access and refresh tokens:
1. Decode and check signature    -> InvalidTokenError
2. Check expiry                  -> AccessTokenExpiredError / RefreshTokenExpiredError
3. Compare the "id" claim with the identity the caller expects
                                 -> IdentityMismatchError
Refresh tokens must additionally equal the token stored for the user.

Security:
- Unknown email and wrong password raise the same MismatchError
- Login overwrites the stored refresh token, so only the latest
  login's refresh token is ever valid
"""

import hmac
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Type
from uuid import UUID

from pydantic import BaseModel
from sqlmodel import Session as DBSession

from flotify.auth.encryption import RefreshTokenCipher
from flotify.auth.password import hash_password, needs_rehash, verify_password
from flotify.auth.repository import AuthRepository
from flotify.auth.tokens import AuthConfig, Clock, TokenCodec, utc_now
from flotify.errors import (
    AccessTokenExpiredError,
    AuthError,
    IdentityMismatchError,
    InvalidTokenError,
    MismatchError,
    RefreshTokenExpiredError,
)
from flotify.log import get_logger


logger = get_logger(__name__)

# Verified against when the email is unknown, so response time does not
# depend on whether the account exists.
_DUMMY_HASH = hash_password("flotify-dummy-password")


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class AuthManager:
    """
    Login and token verification service.
    
    Args:
        config: Secret key, algorithm and token lifetimes
        session_factory: Opens database sessions for the credential store
        cipher: Optional refresh token encryption
        clock: Current UTC time source (injectable for tests)
    """
    
    def __init__(
        self,
        config: AuthConfig,
        session_factory: Callable[[], DBSession],
        cipher: Optional[RefreshTokenCipher] = None,
        clock: Clock = utc_now,
    ):
        self.config = config
        self.codec = TokenCodec(config, clock=clock)
        self._session_factory = session_factory
        self._cipher = cipher
    
    def generate_jwt(self, identity: UUID, ttl: timedelta) -> str:
        """Mint a signed token for identity, valid for ttl from now."""
        return self.codec.encode(identity, ttl)
    
    def _verify(
        self,
        token: str,
        identity: UUID,
        expired_error: Type[AuthError],
    ) -> Dict[str, Any]:
        claims = self.codec.decode(token)
        
        if self.codec.is_expired(claims):
            raise expired_error()
        
        try:
            subject = UUID(str(claims["id"]))
        except (KeyError, ValueError) as e:
            raise InvalidTokenError() from e
        
        if subject != identity:
            raise IdentityMismatchError()
        
        return claims
    
    def verify_access_token(self, token: str, identity: UUID) -> Dict[str, Any]:
        """
        Verify an access token belongs to identity and is still valid.
        
        Returns:
            The token's claims
            
        Raises:
            InvalidTokenError: Malformed, wrongly signed or non-HMAC token
            AccessTokenExpiredError: Valid signature but past expiry
            IdentityMismatchError: Token issued for a different user
        """
        return self._verify(token, identity, AccessTokenExpiredError)
    
    def verify_refresh_token(self, identity: UUID, token: str) -> Dict[str, Any]:
        """
        Verify a refresh token and that it is the one currently stored.
        
        Raises:
            InvalidTokenError: Malformed token, or not the stored token
            RefreshTokenExpiredError: Valid signature but past expiry
            IdentityMismatchError: Token issued for a different user
            SQLAlchemyError: Credential store failure
        """
        claims = self._verify(token, identity, RefreshTokenExpiredError)
        
        with self._session_factory() as db:
            stored = AuthRepository(db, self._cipher).get_refresh_token(identity)
        
        if stored is None or not hmac.compare_digest(stored.encode("utf-8"), token.encode("utf-8")):
            raise InvalidTokenError()
        
        return claims
    
    def store_refresh_token(self, identity: UUID, token: str) -> None:
        """Replace the stored refresh token for identity (last write wins)."""
        with self._session_factory() as db:
            AuthRepository(db, self._cipher).store_refresh_token(identity, token)
    
    def revoke_refresh_token(self, identity: UUID) -> None:
        with self._session_factory() as db:
            AuthRepository(db, self._cipher).delete_refresh_token(identity)
    
    def login(self, email: str, password: str) -> TokenPair:
        """
        Authenticate with email and password and issue a token pair.
        
        On success the new refresh token replaces the stored one; that
        write is the only side effect of login.
        
        Args:
            email: Login email
            password: Plaintext password
            
        Returns:
            TokenPair with access (short-lived) and refresh (long-lived) tokens
            
        Raises:
            MismatchError: Unknown email or wrong password
            SQLAlchemyError: Credential store failure
        """
        with self._session_factory() as db:
            repository = AuthRepository(db, self._cipher)
            user = repository.get_user_by_email(email)
            
            if user is None:
                verify_password(password, _DUMMY_HASH)
                logger.info("auth.login.failure")
                raise MismatchError()
            
            if not verify_password(password, user.password_hash):
                logger.info("auth.login.failure")
                raise MismatchError()
            
            # Upgrade hashes made with an older work factor
            if needs_rehash(user.password_hash, self.config.bcrypt_work_factor):
                repository.update_password_hash(
                    user.id, hash_password(password, self.config.bcrypt_work_factor)
                )
            
            user_id = user.id
        
        access_token = self.generate_jwt(user_id, self.config.access_token_ttl)
        refresh_token = self.generate_jwt(user_id, self.config.refresh_token_ttl)
        self.store_refresh_token(user_id, refresh_token)
        
        logger.info("auth.login.success", user_id=str(user_id))
        return TokenPair(access_token=access_token, refresh_token=refresh_token)
    
    def refresh(self, identity: UUID, refresh_token: str) -> str:
        """
        Exchange a valid, current refresh token for a new access token.
        
        Raises:
            Same as verify_refresh_token
        """
        self.verify_refresh_token(identity, refresh_token)
        logger.info("auth.refresh.success", user_id=str(identity))
        return self.generate_jwt(identity, self.config.access_token_ttl)
