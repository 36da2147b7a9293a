"""Application configuration using Pydantic Settings.

Reads configuration from environment variables with sensible defaults.
All secrets should be provided via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # =========================================================================
    # Draft store
    # =========================================================================
    draft_store_backend: Literal["memory", "database"] = Field(
        default="memory",
        description="Backend for namespaced workflow collections",
    )
    workflow_config_path: str = Field(
        default="config/workflows.yaml",
        description="YAML file with the status transition tables",
    )

    # =========================================================================
    # Database
    # =========================================================================
    db_user: str = Field(
        default="marketflow",
        description="Database user",
    )
    db_password: str = Field(
        default="",
        description="Database password",
    )
    db_name: str = Field(
        default="marketflow",
        description="Database name",
    )
    db_connection_name: str = Field(
        default="",
        description="Cloud SQL connection name (project:region:instance)",
    )
    db_host: str = Field(
        default="localhost",
        description="Database host (for local development)",
    )
    db_port: int = Field(
        default=5432,
        description="Database port (for local development)",
    )
    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size",
    )
    db_pool_max_overflow: int = Field(
        default=10,
        description="Max overflow connections beyond pool size",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Build database URL based on environment.

        With a Cloud SQL connection name, uses the Unix socket.
        Otherwise uses a TCP connection.
        """
        if self.db_connection_name:
            socket_path = f"/cloudsql/{self.db_connection_name}"
            return (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@/{self.db_name}?host={socket_path}"
            )
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================================================================
    # Hosted record store
    # =========================================================================
    record_store_url: str = Field(
        default="http://localhost:8090",
        description="Base URL of the hosted CRUD record store",
    )
    record_store_timeout: float = Field(
        default=15.0,
        description="Record store request timeout in seconds",
    )
    record_store_api_key: str = Field(
        default="",
        description="API key sent to the record store (from Secret Manager)",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON (for Cloud Logging)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
