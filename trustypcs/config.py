"""Application configuration using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = Field(default="TrustyPCS", alias="APP_NAME")

    # Database
    database_url: str = Field(default="sqlite:///./trustypcs.db", alias="DATABASE_URL")

    # Settings store backend: "sql" or "memory"
    settings_store: str = Field(default="sql", alias="SETTINGS_STORE")

    # CORS
    cors_allow_origin: str = Field(default="*", alias="CORS_ALLOW_ORIGIN")

    # Security
    settings_write_requires_admin: bool = Field(default=False, alias="SETTINGS_WRITE_REQUIRES_ADMIN")
    secret_key: str = Field(default="change-this-in-production", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Observability
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


app_settings = AppSettings()
