"""
Flotify - JWT Token Codec

Encodes and decodes the signed claims set carried by access and
refresh tokens:
- id: User ID the token is bound to
- exp: Expiration as unix seconds
- jti: Random token ID, so two tokens minted in the same second differ

Security:
- Tokens are signed with HMAC (HS512 by default) and a symmetric secret
- Only HMAC-family algorithms are accepted when decoding
- decode() does NOT enforce expiry; is_expired() is a separate check so
  callers can tell an expired token apart from an invalid one
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict
from uuid import UUID

from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict, field_validator

from flotify.config import Settings
from flotify.errors import InvalidTokenError


HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuthConfig(BaseModel):
    """
    Explicit authentication configuration.
    
    Built once at startup and injected into TokenCodec and AuthManager.
    The secret is never read from ambient state after construction.
    """
    model_config = ConfigDict(frozen=True)
    
    secret_key: str
    algorithm: str = "HS512"
    access_token_ttl: timedelta = timedelta(minutes=15)
    refresh_token_ttl: timedelta = timedelta(days=7)
    bcrypt_work_factor: int = 8
    
    @field_validator("secret_key")
    @classmethod
    def secret_key_required(cls, v: str) -> str:
        if not v:
            raise ValueError("SECRET_KEY must be set before issuing or verifying tokens")
        return v
    
    @field_validator("algorithm")
    @classmethod
    def hmac_only(cls, v: str) -> str:
        if v not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm {v!r}; expected one of {HMAC_ALGORITHMS}")
        return v
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            access_token_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_token_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
            bcrypt_work_factor=settings.BCRYPT_WORK_FACTOR,
        )


class TokenCodec:
    """
    Signs and parses compact JWS tokens.
    
    Pure over its inputs plus the read-only secret, so one instance is
    shared by every request thread.
    """
    
    def __init__(self, config: AuthConfig, clock: Clock = utc_now):
        self._config = config
        self._clock = clock
    
    def now(self) -> datetime:
        return self._clock()
    
    def encode(self, identity: UUID, ttl: timedelta) -> str:
        """
        Create a signed token bound to an identity.
        
        Args:
            identity: User ID to embed in the "id" claim
            ttl: Lifetime from now
            
        Returns:
            Compact signed JWT string
        """
        expire = self.now() + ttl
        claims = {
            "id": str(identity),
            "exp": int(expire.timestamp()),
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(claims, self._config.secret_key, algorithm=self._config.algorithm)
    
    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify a token's signature and return all of its claims.
        
        Expiry is deliberately not checked here.
        
        Args:
            token: Compact JWT string
            
        Returns:
            Claims dictionary
            
        Raises:
            InvalidTokenError: Malformed token, non-HMAC algorithm, or
                bad signature
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidTokenError() from e
        
        # Reject before touching the key: blocks algorithm confusion
        if header.get("alg") not in HMAC_ALGORITHMS:
            raise InvalidTokenError()
        
        try:
            return jwt.decode(
                token,
                self._config.secret_key,
                algorithms=list(HMAC_ALGORITHMS),
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise InvalidTokenError() from e
    
    def is_expired(self, claims: Dict[str, Any]) -> bool:
        """
        Check the "exp" claim against the current time (whole seconds).
        
        Raises:
            InvalidTokenError: If "exp" is missing or not a number
        """
        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidTokenError()
        return int(exp) < int(self.now().timestamp())
