"""
Configuration management for the auth service
"""
from functools import lru_cache

from pydantic_settings import SettingsConfigDict

from ..core.config import ServiceSettings


class Settings(ServiceSettings):
    """Auth service configuration loaded from AUTH_-prefixed environment variables"""

    PORT: int = 8000
    DATABASE_URL: str = "sqlite:///./auth.db"

    # Token lifetime
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    model_config = SettingsConfigDict(env_prefix="AUTH_")


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process and never mutated afterwards."""
    return Settings()
