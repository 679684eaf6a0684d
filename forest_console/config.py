"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Backend API Configuration
    api_base_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the forest management REST backend"
    )
    request_timeout: float = Field(
        default=30.0,
        description="Seconds before a backend request is abandoned"
    )
    attach_auth_token: bool = Field(
        default=True,
        description="Send the session's auth token as a bearer token on entity requests"
    )

    # Session
    session_secret_key: str = Field(
        default="change-me-in-production",
        description="Secret used to sign the session cookie"
    )
    view_idle_timeout: float = Field(
        default=1800.0,
        description="Seconds of inactivity after which a session's screens are dropped"
    )
    max_view_sessions: int = Field(
        default=500,
        description="Maximum number of sessions whose screens are kept in memory"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=20,
        description="Maximum login/signup attempts per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Forest Management Console",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
