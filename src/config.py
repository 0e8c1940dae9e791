"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
A single immutable ``Settings`` instance is built at startup and passed into every
pipeline stage; stages never read the process environment themselves.

Features:
- Environment variable and .env loading
- Secure credential management
- Sample-size and concurrency limits for the data service
- Credential checks that fail before any network activity
"""

from typing import List, Optional
import os

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigurationError
from logger import LogManager


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Attributes:
        app_name (str): Name of the application
        dev (bool): Human readable console logs
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: info)
        data_dir (str): Directory of the company record store
        github_token (Optional[SecretStr]): GitHub API authentication token
        openai_api_key (Optional[SecretStr]): OpenAI API key
        openai_llm_model (str): OpenAI model used for every completion
        repository_sample_size (int): Top repositories kept per organization
        commit_sample_size (int): Recent commits fetched per repository
        contributor_sample_size (int): Top contributors resolved per repository
        metrics_window (int): Recent commits used for average churn
        commit_fetch_concurrency (int): Concurrent per-commit detail fetches
    """

    # Application settings
    app_name: str = Field(default="Orgpulse", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")
    log_dir: str = Field(default="logs", description="Logging directory")
    log_level: int = Field(default=20, description="Logging level, default info")
    data_dir: str = Field(default="data", description="Company record directory")

    # Credentials, checked per stage through require()
    github_token: Optional[SecretStr] = Field(default=None, description="GitHub token")
    openai_api_key: Optional[SecretStr] = Field(
        default=None, description="OpenAI API key"
    )

    # OpenAI configuration
    openai_llm_model: str = Field(default="gpt-4o-mini", description="OpenAI LLM model")
    openai_encoding_name: str = Field(default="o200k_base", description="Encoding name")
    openai_max_requests_per_minute: int = Field(
        default=500, description="OpenAI max requests per minute"
    )
    openai_max_tokens_per_minute: int = Field(
        default=200000, description="OpenAI max tokens per minute"
    )
    openai_period: int = Field(default=60, description="OpenAI period in seconds")
    openai_request_timeout: float = Field(
        default=120.0, description="OpenAI request timeout in seconds"
    )
    max_diff_tokens: int = Field(
        default=6000, description="Token budget for a diff sent to summarization"
    )

    # Sampling configuration
    repository_sample_size: int = Field(
        default=1, ge=1, description="Top repositories selected per organization"
    )
    repository_page_size: int = Field(
        default=100, ge=1, le=100, description="Repository listing page size"
    )
    commit_sample_size: int = Field(
        default=10, ge=1, le=100, description="Recent commits fetched per repository"
    )
    contributor_sample_size: int = Field(
        default=50, ge=1, le=100, description="Top contributors per repository"
    )
    metrics_window: int = Field(
        default=3, ge=1, description="Recent commits used for average churn"
    )
    commit_fetch_concurrency: int = Field(
        default=4, ge=1, description="Concurrent per-commit detail fetches"
    )

    @field_validator("data_dir", "log_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure directory paths are absolute.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path
        """
        if v and not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    def require(self, *names: str) -> None:
        """
        Check that the named credentials are set.

        Args:
            *names (str): Setting names, e.g. "github_token"

        Raises:
            ConfigurationError: If any of them is unset or empty
        """
        missing: List[str] = []
        for name in names:
            value = getattr(self, name)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if not value:
                missing.append(name.upper())
        if missing:
            raise ConfigurationError(
                f"Missing credentials: {', '.join(missing)}. Please check your .env file."
            )

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
        frozen=True,
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
logger = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
).logger
