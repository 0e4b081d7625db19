"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./time_profiles.db"
    DEFAULT_TZ: str = "UTC"
    # Ids are allocated as region * REGION_FACTOR + local sequence
    REGION_FACTOR: int = 1_000_000_000_000
    REGION_NUMBER: int = 0
    SEED_ON_STARTUP: bool = True
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
