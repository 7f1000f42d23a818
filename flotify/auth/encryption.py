"""
Flotify - Refresh Token Encryption

Optional Fernet encryption of refresh tokens at rest.

Disabled by default (Settings.REFRESH_TOKEN_ENCRYPTION). Enabling it
changes the stored format of the refresh_tokens table, so rows written
before the switch no longer verify and users have to log in again.
"""

from cryptography.fernet import Fernet, InvalidToken

from flotify.errors import InvalidTokenError


class RefreshTokenCipher:
    """Symmetric encryption for stored refresh tokens."""
    
    def __init__(self, key: str):
        if not key:
            raise ValueError("REFRESH_TOKEN_KEY must be set when refresh token encryption is enabled")
        # Fernet validates the key is 32 url-safe base64-encoded bytes
        self._fernet = Fernet(key.encode("utf-8"))
    
    @staticmethod
    def generate_key() -> str:
        return Fernet.generate_key().decode("utf-8")
    
    def encrypt(self, token: str) -> str:
        return self._fernet.encrypt(token.encode("utf-8")).decode("utf-8")
    
    def decrypt(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise InvalidTokenError() from exc
