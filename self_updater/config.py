"""Configuration management for the self-updater."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SELF_UPDATER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SELF_UPDATER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=9090, description="Port to listen on")
    route_path: str = Field(default="/api/update", description="Path of the update endpoint")

    # Working copy
    project_dir: str = Field(default=".", description="Git working copy to update")
    upstream_url: str = Field(
        default="https://github.com/stackblitz-labs/bolt.diy.git",
        description="Repository suggested when no origin remote is configured",
    )

    # Package manager
    install_command: str = Field(default="pnpm install", description="Dependency install command")
    build_command: str = Field(default="pnpm build", description="Build command")
    command_timeout_seconds: float | None = Field(
        default=None, description="Per-command timeout; unset waits indefinitely"
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
