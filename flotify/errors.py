"""
Flotify - Error Taxonomy

Every domain failure is a FlotifyError subclass carrying the HTTP status
it maps to and a fixed message. Messages never reveal which part of
credential verification failed.
"""

from typing import Optional


class FlotifyError(Exception):
    """Base class for all domain errors."""
    status_code: int = 500
    message: str = "internal server error"
    
    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# =============================================================================
# AUTHENTICATION
# =============================================================================

class AuthError(FlotifyError):
    """Any failure that should surface as 401 Unauthorized."""
    status_code = 401
    message = "unauthorized"


class InvalidTokenError(AuthError):
    """Malformed token, bad signature, or a non-HMAC signing algorithm."""
    message = "invalid token"


class AccessTokenExpiredError(AuthError):
    message = "access token is expired"


class RefreshTokenExpiredError(AuthError):
    message = "refresh token is expired"


class IdentityMismatchError(AuthError):
    """Token subject differs from the identity that owns the resource."""
    message = "token does not belong to this user"


class MissingTokenError(AuthError):
    message = "token nonexist"


class MismatchError(AuthError):
    """Unknown email or wrong password; deliberately indistinguishable."""
    message = "email or password does not match"


# =============================================================================
# USERS
# =============================================================================

class PasswordLengthError(FlotifyError):
    status_code = 400
    message = "password length must be between 8 and 64 character"


class OldPasswordMismatchError(FlotifyError):
    status_code = 400
    message = "old password does not match"


class DuplicateUsernameError(FlotifyError):
    status_code = 400
    message = "this username has been used"


class DuplicateEmailError(FlotifyError):
    status_code = 400
    message = "this email has been used"


class InvalidIdError(FlotifyError):
    """Path identifier is not a UUID."""
    status_code = 400
    message = "invalid id"


# =============================================================================
# CATALOG
# =============================================================================

class NotFoundError(FlotifyError):
    status_code = 404
    message = "record not found"


class NonExistArtistError(NotFoundError):
    message = "non exist artist record in database"


class NonExistTrackError(NotFoundError):
    message = "non exist track record in database"


class NonExistUserError(NotFoundError):
    message = "non exist user record in database"


class NonExistPlaylistError(NotFoundError):
    message = "non exist playlist record in database"


class InvalidSortError(FlotifyError):
    status_code = 400
    message = "invalid sort criteria"
