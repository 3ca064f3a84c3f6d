# app/core/config.py
# Application settings (database URL, identity provider keys, storage paths)
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str
    # Print every SQL statement to the console
    SQL_ECHO: bool = False
    # Create missing tables on startup
    AUTO_CREATE_TABLES: bool = True

    # Identity provider session tokens
    # HS* algorithms take a shared secret, RS* a PEM public key
    IDP_JWT_KEY: str
    IDP_JWT_ALGORITHM: str = "RS256"
    IDP_ISSUER: Optional[str] = None
    # Identity provider backend API (user record lookup)
    IDP_API_URL: str = "https://api.clerk.com/v1"
    IDP_SECRET_KEY: Optional[str] = None

    # Role metadata value that unlocks /admin
    ADMIN_ROLE: str = "admin"

    # Swap requests
    SWAP_REQUEST_TTL_DAYS: int = 7

    # Object storage (profile photos)
    STORAGE_DIR: str = "static"
    PROFILE_PHOTO_BUCKET: str = "profile-photos"
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Environment file
    class Config:
        env_file = ".env"

# Shared settings instance
settings = Settings()
