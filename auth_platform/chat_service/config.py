"""
Configuration management for the chat service
"""
from functools import lru_cache

from pydantic_settings import SettingsConfigDict

from ..core.config import ServiceSettings


class Settings(ServiceSettings):
    """Chat service configuration loaded from CHAT_-prefixed environment variables"""

    PORT: int = 8001
    DATABASE_URL: str = "sqlite:///./chat.db"

    # Message listing
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(env_prefix="CHAT_")


@lru_cache
def get_settings() -> Settings:
    return Settings()
