"""
Flotify - Request/Response Schemas

Pydantic models for API request validation and response serialization.
Separates API contracts from database models.

Password length is checked in the handlers rather than here so that it
surfaces as PasswordLengthError (400) instead of a generic validation error.
"""

import re
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


_EMAIL_RE = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


def _normalize_email(v: str) -> str:
    """Basic email format validation (allows .local for development)."""
    if not _EMAIL_RE.match(v):
        raise ValueError("Invalid email format")
    return v.lower()


# =============================================================================
# AUTH
# =============================================================================

class LoginRequest(BaseModel):
    """Request body for POST /users/login."""
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    
    @field_validator("email")
    @classmethod
    def email_format(cls, v):
        return _normalize_email(v)


class LoginResponse(BaseModel):
    """Response body for successful login. Keys contain spaces on the wire."""
    model_config = ConfigDict(populate_by_name=True)
    
    access_token: str = Field(..., alias="access token")
    refresh_token: str = Field(..., alias="refresh token")


class RefreshRequest(BaseModel):
    """Request body for POST /users/{id}/refresh."""
    refresh_token: str = Field(..., description="Refresh token from login")


class RefreshResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    access_token: str = Field(..., alias="access token")


# =============================================================================
# USERS
# =============================================================================

class RegisterRequest(BaseModel):
    """Request body for POST /users/register."""
    username: str = Field(..., min_length=1, max_length=64)
    email: str
    password: str
    
    @field_validator("email")
    @classmethod
    def email_format(cls, v):
        return _normalize_email(v)


class UpdateUserRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str


class UserResponse(BaseModel):
    """User information; the password hash is never serialized."""
    model_config = ConfigDict(from_attributes=True)
    
    id: UUID
    username: str
    email: str


class FollowArtistRequest(BaseModel):
    id: UUID = Field(..., description="Artist to follow")


# =============================================================================
# CATALOG
# =============================================================================

class ArtistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""


class ArtistUpdate(ArtistCreate):
    id: UUID


class ArtistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: UUID
    name: str
    description: str


class ArtistListResponse(BaseModel):
    artists: List[ArtistResponse]


class TrackCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    length: int = Field(0, ge=0, description="Duration in seconds")
    artist_ids: List[UUID] = Field(default_factory=list)


class TrackUpdate(TrackCreate):
    id: UUID
    artist_ids: Optional[List[UUID]] = None  # None keeps the current artists


class TrackResponse(BaseModel):
    id: UUID
    name: str
    length: int
    artist_ids: List[UUID] = Field(default_factory=list)


class TrackListResponse(BaseModel):
    tracks: List[TrackResponse]


class PlaylistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class PlaylistTracksRequest(BaseModel):
    track_ids: List[UUID] = Field(..., min_length=1)


class PlaylistResponse(BaseModel):
    id: UUID
    name: str
    user_id: UUID
    track_ids: List[UUID] = Field(default_factory=list)


class PlaylistListResponse(BaseModel):
    playlists: List[PlaylistResponse]


# =============================================================================
# COMMON
# =============================================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    status: bool = False
    message: str
