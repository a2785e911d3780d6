"""Central application settings loaded from environment variables."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./chess_academy.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Admin program list
    ADMIN_PAGE_SIZE: int = 10
    ADMIN_PAGE_SIZE_MAX: int = 100

    # Program defaults
    DEFAULT_WHATSAPP_NUMBER: str = "+917039184939"

    # Admin client
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT_SECONDS: float = 30.0

    class Config:
        # Load backend/.env regardless of the working directory.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
