"""Application configuration with validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "ABLLS Assessment Platform"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Snowflake (session + template store)
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_CONNECT_TIMEOUT: int = Field(default=5, ge=1)
    CACHE_NAMESPACE: str = "ablls"
    CACHE_TTL_TEMPLATE: int = Field(default=86400, ge=1)  # 24 hours

    # Report
    REPORT_TITLE: str = "ABLLS Assessment Report"
    REPORT_CREATOR: str = "ABLLS Assessment System"

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has sane settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if not self.SNOWFLAKE_ACCOUNT or not self.SNOWFLAKE_USER:
                raise ValueError("Snowflake account and user are required in production")
        return self

    @property
    def snowflake_configured(self) -> bool:
        return bool(self.SNOWFLAKE_ACCOUNT and self.SNOWFLAKE_USER and self.SNOWFLAKE_PASSWORD)


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
