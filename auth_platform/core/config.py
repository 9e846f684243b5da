"""
Settings shared by both services.

Each service subclasses ServiceSettings with its own env prefix and
defaults. The signing secret is read from the unprefixed `JWT_SECRET`
variable by both, since tokens issued by one service are verified by the
other. There is no default: a service without a secret does not start.
"""
from typing import List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    """Configuration common to every service, loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Token Configuration
    JWT_SECRET: SecretStr = Field(..., validation_alias="JWT_SECRET")

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        """HS256 keys shorter than the digest size are rejected"""
        if len(v.get_secret_value()) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters")
        return v

    @property
    def jwt_secret(self) -> str:
        return self.JWT_SECRET.get_secret_value()
