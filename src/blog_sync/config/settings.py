"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1

    # --- Storage ---
    sqlite_path: str = "~/.blog-sync/blog.db"

    # --- Git working copy ---
    working_copy_path: str = "~/.blog-sync/repository"
    posts_subdir: str = "content/posts"  # relative to the working copy
    git_executable: str = "git"
    git_network_timeout: float = 120.0  # seconds, per remote command

    # --- Export ---
    export_dir: str = "~/.blog-sync/export"
    export_template: str = "hugo.md"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.sqlite_path = str(Path(self.sqlite_path).expanduser())
        self.working_copy_path = str(Path(self.working_copy_path).expanduser())
        self.export_dir = str(Path(self.export_dir).expanduser())

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
