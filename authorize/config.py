"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTHZ_", extra="ignore")

    APP_ROOT_PATH: str = ""
    APP_TITLE: str = "OAuth 2.0 Authorization Code Server"
    APP_VERSION: str = "0.1.0"
    OPENAPI_URL: str = ""

    # Authorization code grant
    AUTH_CODE_LIFETIME: int = Field(default=30, gt=0)
    CONTINUE_AFTER_RESPONSE: bool = False
    REDIRECT_ERRORS: bool = True
    CODE_BYTES: int = Field(default=32, ge=16)

    DB_URL: str = "postgresql+asyncpg://localhost:5432/authorize"
    DB_SCHEMA: str | None = None
    DB_CREATE_TABLES: bool = False
    DB_RETRY_ATTEMPTS: int = Field(default=3, ge=1)

    LOG_JSON: bool = True

    # CORS settings
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = ["Authorization", "Content-Type"]
    CORS_ALLOW_CREDENTIALS: bool = False


settings = Settings()
