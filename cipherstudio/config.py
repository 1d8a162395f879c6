"""Configuration - infrastructure and editor settings

Values come from environment variables or a local .env file.
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    - Supabase connection (projects and files tables live there)
    - Tree presentation (path separator, default project name)
    - Save policy (optional whole-save retry)
    - HTTP server and logging
    """

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    projects_table: str = "projects"
    files_table: str = "files"

    # Tree
    path_separator: str = "/"
    default_project_name: str = "My First Project"

    # Save policy: 1 means no retry, the caller sees the first failure
    save_max_attempts: int = 1
    save_retry_delay: float = 1.0

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_dir: Path = Path("logs")
    log_level: str = "INFO"

    @field_validator("path_separator")
    @classmethod
    def separator_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("path_separator cannot be empty")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
