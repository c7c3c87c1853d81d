"""Central application settings, loaded from environment variables and .env."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    ENV: str = "local"
    DATABASE_URL: str = "sqlite:///./skills_tracker.db"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # JWT
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    JWT_ISSUER: str = "SkillsTracker"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
