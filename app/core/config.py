"""
Configuration management for the VCard Backend application.
Handles environment variables and storage backend selection for the user record store.
"""

from typing import Any, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "VCard Backend"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]
    ALLOWED_HOSTS: List[str] = [
        "localhost",
        "127.0.0.1",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"

    # File backend
    FILE_DB_PATH: str = "server_db.json"

    # Remote table backend (Supabase / PostgREST)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    # Alternate env names used by the web client build
    NEXT_PUBLIC_SUPABASE_URL: Optional[str] = None
    NEXT_PUBLIC_SUPABASE_KEY: Optional[str] = None
    SUPABASE_TABLE: str = "users"
    SUPABASE_TIMEOUT: float = 10.0

    def remote_table_configured(self) -> bool:
        """Remote table mode needs both an endpoint and an access key."""
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v):
        """Parse allowed hosts from string or list."""
        if isinstance(v, str):
            return [host.strip() for host in v.split(",")]
        return v

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of {allowed_envs}")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def model_post_init(self, __context: Any) -> None:  # type: ignore[override]
        """Normalize alternate env var names to the primary Supabase fields."""
        if not self.SUPABASE_URL and self.NEXT_PUBLIC_SUPABASE_URL:
            self.SUPABASE_URL = self.NEXT_PUBLIC_SUPABASE_URL
        if not self.SUPABASE_KEY and self.NEXT_PUBLIC_SUPABASE_KEY:
            self.SUPABASE_KEY = self.NEXT_PUBLIC_SUPABASE_KEY


# Create global settings instance
settings = Settings()
