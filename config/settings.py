"""
Configuration management using Pydantic Settings.

Environment variables:
- DATABASE_URL: SQLAlchemy database URL for merge records
- MERGE_COMPRESS_STREAMS: Flate-compress unfiltered streams in merged output
- MERGE_BOOKMARK_TITLE: Bookmark title template ({n} = input counter)
- MERGE_MAX_INPUTS: Maximum number of files per merge request
- MERGE_MAX_UPLOAD_MB: Maximum size of a single uploaded file
- LOG_LEVEL: Logging level for CLI and API entry points
"""
from pydantic import Field
from pydantic_settings import BaseSettings

from core.constants import DEFAULT_BOOKMARK_TITLE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///merge_store.db",
        env="DATABASE_URL"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", env="API_HOST")
    api_port: int = Field(default=8002, env="API_PORT")

    # Merge Parameters
    merge_compress_streams: bool = Field(default=True, env="MERGE_COMPRESS_STREAMS")
    merge_bookmark_title: str = Field(default=DEFAULT_BOOKMARK_TITLE, env="MERGE_BOOKMARK_TITLE")
    merge_max_inputs: int = Field(default=100, env="MERGE_MAX_INPUTS")
    merge_max_upload_mb: int = Field(default=50, env="MERGE_MAX_UPLOAD_MB")

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def get_merge_config(self) -> dict:
        """Get merge configuration as dictionary."""
        return {
            'compress': self.merge_compress_streams,
            'bookmark_title': self.merge_bookmark_title,
            'max_inputs': self.merge_max_inputs,
            'max_upload_bytes': self.merge_max_upload_mb * 1024 * 1024,
        }


# Global settings instance
settings = Settings()
