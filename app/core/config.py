# app/core/config.py
# Application settings (database URL, JWT secret, upload directory, etc.)
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str
    # Print SQL statements to the console
    DATABASE_ECHO: bool = False

    # JWT
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    # Only used when issuing tokens from tooling / tests
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Notification inbox
    NOTIFICATIONS_PAGE_SIZE: int = 20
    NOTIFICATIONS_MAX_PAGE_SIZE: int = 100
    NOTIFICATIONS_RECENT_LIMIT: int = 10

    # Media uploads
    MEDIA_UPLOAD_DIR: str = "uploads"
    MEDIA_MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50MB
    MEDIA_URL_PREFIX: str = "/api/uploads"

    # Chatwoot integration
    CHATWOOT_TIMEOUT_SECONDS: float = 10.0
    PHONE_DEFAULT_REGION: str = "BR"

    CORS_ORIGINS: List[str] = ["*"]

    # Environment file
    class Config:
        env_file = ".env"


settings = Settings()
