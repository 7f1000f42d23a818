"""
Flotify - Credential Store

Database access for login credentials and the per-user refresh token.
Store errors (SQLAlchemyError) propagate unchanged to the caller.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session as DBSession, select

from flotify.auth.encryption import RefreshTokenCipher
from flotify.models import RefreshToken, User, utcnow


class AuthRepository:
    """
    Credential and refresh-token persistence for one database session.
    
    Args:
        db: Open database session
        cipher: Encrypts stored refresh tokens when configured
    """
    
    def __init__(self, db: DBSession, cipher: Optional[RefreshTokenCipher] = None):
        self.db = db
        self.cipher = cipher
    
    def get_user_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email.lower())
        return self.db.exec(statement).first()
    
    def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        user = self.db.get(User, user_id)
        if user is None:
            return
        user.password_hash = password_hash
        self.db.add(user)
        self.db.commit()
    
    def _write_refresh_token(self, user_id: UUID, stored: str) -> None:
        row = self.db.get(RefreshToken, user_id)
        if row is None:
            row = RefreshToken(user_id=user_id, token=stored)
        else:
            row.token = stored
            row.updated_at = utcnow()
        
        self.db.add(row)
        self.db.commit()
    
    def store_refresh_token(self, user_id: UUID, token: str) -> None:
        """
        Persist the refresh token for a user, replacing any previous one.
        
        Concurrent logins race and the last commit wins. When a concurrent
        first login inserts the row between our lookup and our insert, the
        primary key conflict is rolled back and the write retried as an
        update.
        """
        stored = self.cipher.encrypt(token) if self.cipher else token
        
        try:
            self._write_refresh_token(user_id, stored)
        except IntegrityError:
            self.db.rollback()
            self._write_refresh_token(user_id, stored)
    
    def get_refresh_token(self, user_id: UUID) -> Optional[str]:
        """Return the live refresh token for a user, or None."""
        row = self.db.get(RefreshToken, user_id)
        if row is None:
            return None
        return self.cipher.decrypt(row.token) if self.cipher else row.token
    
    def delete_refresh_token(self, user_id: UUID) -> None:
        row = self.db.get(RefreshToken, user_id)
        if row is not None:
            self.db.delete(row)
            self.db.commit()
