from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SecurityConfig(BaseSettings):
    """Session token and cookie configuration."""

    session_secret_key: SecretStr = Field(
        default=SecretStr("change-me"),
        validation_alias="SESSION_SECRET",
    )
    session_algorithm: str = Field(default="HS256", validation_alias="SESSION_ALGORITHM")
    session_lifetime_hours: int = Field(
        default=24,
        validation_alias="SESSION_LIFETIME_HOURS",
        ge=1,
    )
    session_cookie_name: str = Field(
        default="session",
        validation_alias="SESSION_COOKIE_NAME",
    )
    session_cookie_secure: bool = Field(
        default=False,
        validation_alias="SESSION_COOKIE_SECURE",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Flight Training Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"

    # Populate the in-memory store with the demo roster on startup
    seed_demo_data: bool = True

    # Enforce the booking/flight log transition tables instead of warning
    strict_status_transitions: bool = False

    # Security
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
