"""
Flotify - Database Models

SQLModel tables for the music catalog and its credential store.

Security:
- Passwords stored as bcrypt hashes only
- Exactly one refresh token row per user (user_id is the primary key)
- All timestamps in UTC
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    User account.
    
    Attributes:
        id: Unique identifier (UUIDv4), immutable once issued
        username: Display name (unique)
        email: Login identifier (unique, indexed)
        password_hash: bcrypt hash (never store plaintext)
        created_at: Account creation timestamp (UTC)
    """
    __tablename__ = "users"
    
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        description="Unique user identifier"
    )
    username: str = Field(
        sa_column=Column(String(64), unique=True, nullable=False),
        description="Unique display name"
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="User email address (login identifier)"
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="bcrypt password hash"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Account creation timestamp"
    )


class RefreshToken(SQLModel, table=True):
    """
    The single live refresh token of a user.
    
    A new login overwrites the row, which invalidates every refresh
    token issued before it.
    
    Attributes:
        user_id: Owning user (primary key)
        token: Signed refresh token as issued, or its ciphertext when
            refresh token encryption is enabled
        updated_at: Last overwrite timestamp
    """
    __tablename__ = "refresh_tokens"
    
    user_id: UUID = Field(
        foreign_key="users.id",
        primary_key=True,
        ondelete="CASCADE",
        description="Owning user"
    )
    token: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Stored refresh token"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class Artist(SQLModel, table=True):
    __tablename__ = "artists"
    
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(sa_column=Column(String(255), index=True, nullable=False))
    description: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))


class Track(SQLModel, table=True):
    """
    A track. Its artists live in the tracks_artists link table.
    
    Attributes:
        id: Unique identifier
        name: Track title
        length: Duration in seconds
    """
    __tablename__ = "tracks"
    
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(sa_column=Column(String(255), index=True, nullable=False))
    length: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))


class TrackArtistLink(SQLModel, table=True):
    __tablename__ = "tracks_artists"
    
    track_id: UUID = Field(foreign_key="tracks.id", primary_key=True, ondelete="CASCADE")
    artist_id: UUID = Field(foreign_key="artists.id", primary_key=True, ondelete="CASCADE")


class UserArtistLink(SQLModel, table=True):
    """Artists followed by a user."""
    __tablename__ = "artists_users"
    
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    artist_id: UUID = Field(foreign_key="artists.id", primary_key=True, ondelete="CASCADE")


class Playlist(SQLModel, table=True):
    __tablename__ = "playlists"
    
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(sa_column=Column(String(255), nullable=False))
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class PlaylistTrackLink(SQLModel, table=True):
    __tablename__ = "playlist_tracks"
    
    playlist_id: UUID = Field(foreign_key="playlists.id", primary_key=True, ondelete="CASCADE")
    track_id: UUID = Field(foreign_key="tracks.id", primary_key=True, ondelete="CASCADE")
