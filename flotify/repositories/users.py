"""
Flotify - User Repository

Registration, profile changes and followed artists.
Credentials for login are read through flotify.auth.repository.
"""

from typing import List
from uuid import UUID

from sqlmodel import Session as DBSession, select

from flotify.auth.password import BCRYPT_WORK_FACTOR, hash_password, verify_password
from flotify.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    NonExistArtistError,
    NonExistUserError,
    OldPasswordMismatchError,
)
from flotify.models import Artist, Playlist, PlaylistTrackLink, RefreshToken, User, UserArtistLink


class UserRepository:
    def __init__(self, db: DBSession, work_factor: int = BCRYPT_WORK_FACTOR):
        self.db = db
        self.work_factor = work_factor
    
    def _username_taken(self, username: str) -> bool:
        return self.db.exec(select(User.id).where(User.username == username)).first() is not None
    
    def create(self, username: str, email: str, password: str) -> User:
        """
        Register a user, hashing the password.
        
        Raises:
            DuplicateUsernameError: Username already in use
            DuplicateEmailError: Email already registered
        """
        if self._username_taken(username):
            raise DuplicateUsernameError()
        if self.db.exec(select(User.id).where(User.email == email)).first() is not None:
            raise DuplicateEmailError()
        
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password, self.work_factor),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
    
    def get(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NonExistUserError()
        return user
    
    def update_username(self, user_id: UUID, username: str) -> User:
        user = self.get(user_id)
        if user.username == username:
            return user
        if self._username_taken(username):
            raise DuplicateUsernameError()
        
        user.username = username
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
    
    def update_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """
        Replace the stored hash after confirming the old password.
        
        Raises:
            OldPasswordMismatchError: old_password does not match
        """
        user = self.get(user_id)
        if not verify_password(old_password, user.password_hash):
            raise OldPasswordMismatchError()
        
        user.password_hash = hash_password(new_password, self.work_factor)
        self.db.add(user)
        self.db.commit()
    
    def delete(self, user_id: UUID) -> None:
        """Delete a user with their refresh token, follows and playlists."""
        user = self.get(user_id)
        
        playlist_ids = self.db.exec(select(Playlist.id).where(Playlist.user_id == user_id)).all()
        if playlist_ids:
            links = self.db.exec(
                select(PlaylistTrackLink).where(PlaylistTrackLink.playlist_id.in_(playlist_ids))
            ).all()
            for link in links:
                self.db.delete(link)
        
        for model in (Playlist, UserArtistLink, RefreshToken):
            for row in self.db.exec(select(model).where(model.user_id == user_id)).all():
                self.db.delete(row)
        
        self.db.flush()
        self.db.delete(user)
        self.db.commit()
    
    def followed_artists(self, user_id: UUID) -> List[Artist]:
        self.get(user_id)
        statement = (
            select(Artist)
            .join(UserArtistLink, UserArtistLink.artist_id == Artist.id)
            .where(UserArtistLink.user_id == user_id)
            .order_by(Artist.name)
        )
        return list(self.db.exec(statement).all())
    
    def follow_artist(self, user_id: UUID, artist_id: UUID) -> None:
        """
        Follow an artist; following twice is a no-op.
        
        Raises:
            NonExistArtistError: Unknown artist
        """
        self.get(user_id)
        if self.db.get(Artist, artist_id) is None:
            raise NonExistArtistError()
        
        if self.db.get(UserArtistLink, (user_id, artist_id)) is None:
            self.db.add(UserArtistLink(user_id=user_id, artist_id=artist_id))
            self.db.commit()
