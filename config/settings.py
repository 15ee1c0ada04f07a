"""
Application settings and configuration
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8080, description="Server port")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    SHUTDOWN_TIMEOUT: int = Field(
        default=10, description="Seconds to wait for in-flight requests on shutdown"
    )
    REQUEST_TIMEOUT: float = Field(
        default=900.0, description="Upper bound for a single webhook workflow in seconds"
    )

    # GitHub Configuration
    GITHUB_WEBHOOK_SECRET: str = Field(..., description="GitHub webhook secret")
    GITHUB_TOKEN: str = Field(..., description="GitHub personal access token")
    GITHUB_API_URL: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )
    GITHUB_TIMEOUT: float = Field(
        default=30.0, description="GitHub API request timeout in seconds"
    )

    # Local Clone Configuration
    REPOS_BASE_PATH: Optional[Path] = Field(
        default=None,
        description="Directory for local clones; a temporary directory is used when unset",
    )
    GIT_TIMEOUT: int = Field(
        default=300, description="Timeout for a single git command in seconds"
    )
    GIT_USER_NAME: str = Field(
        default="github-review-helper", description="Committer name used for rebases"
    )
    GIT_USER_EMAIL: str = Field(
        default="github-review-helper@localhost",
        description="Committer email used for rebases",
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Global settings instance
settings = Settings()
