"""
Flotify - Configuration Management

Centralized configuration using Pydantic Settings.
All secrets and connection strings are loaded from environment variables.

Security: No secrets are hardcoded. Use .env for local development.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Attributes:
        SECRET_KEY: Symmetric key used to sign and verify every JWT
        JWT_ALGORITHM: HMAC algorithm used when signing new tokens
        ACCESS_TOKEN_EXPIRE_MINUTES: Lifetime of access tokens
        REFRESH_TOKEN_EXPIRE_DAYS: Lifetime of refresh tokens
        BCRYPT_WORK_FACTOR: bcrypt cost factor for new password hashes
        DATABASE_URL: SQLAlchemy URL of the catalog database
        ALLOWED_ORIGINS: CORS allowed origins
        REFRESH_TOKEN_ENCRYPTION: Encrypt refresh tokens at rest (off by default)
        REFRESH_TOKEN_KEY: Fernet key used when encryption is enabled
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )
    
    # Server
    HOST: str = "localhost"
    PORT: int = 8000
    
    # Security
    SECRET_KEY: str = ""  # Must be set via environment
    JWT_ALGORITHM: str = "HS512"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_WORK_FACTOR: int = 8
    
    # Refresh tokens are stored as issued unless this is enabled.
    # Turning it on changes the stored format of existing rows.
    REFRESH_TOKEN_ENCRYPTION: bool = False
    REFRESH_TOKEN_KEY: str = ""
    
    # Database (PostgreSQL for production, SQLite for development)
    DATABASE_URL: str = "sqlite:///./flotify.db"
    DATABASE_ECHO: bool = False
    
    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
