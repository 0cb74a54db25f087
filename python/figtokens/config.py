"""Application settings loaded from environment variables.

Environment Configuration:
    FIGTOKENS_ENV: Deployment environment (local | test | staging | prod)
    DATABASE_URL: SQLAlchemy connection string (required)

Figma API Configuration:
    FIGMA_API_BASE_URL: Base URL of the Figma REST API
    FIGMA_FILE_TIMEOUT_S: Timeout for the primary file fetch
    FIGMA_NODES_TIMEOUT_S: Timeout for the batched style-node lookup
    FIGMA_VARIABLES_TIMEOUT_S: Timeout for the local variables endpoint

Extraction / Sync Configuration:
    STYLE_NODE_FETCH_LIMIT: Max style ids requested by the direct-fetch fallback
    TOKEN_INSERT_BATCH_SIZE: Rows per bulk insert when replacing token entries

Note: Figma personal access tokens are never configured here. They are
supplied per request and passed through to the API untouched.
"""

from enum import Enum
from functools import lru_cache
from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables.
    Validation rules:
    - DATABASE_URL is always required
    - FIGMA_VARIABLES_TIMEOUT_S may not exceed FIGMA_FILE_TIMEOUT_S
    - STYLE_NODE_FETCH_LIMIT must be between 1 and 100
    - TOKEN_INSERT_BATCH_SIZE must be between 1 and 1000
    """

    figtokens_env: Environment = Field(default=Environment.LOCAL, alias="FIGTOKENS_ENV")
    database_url: Annotated[str, Field(alias="DATABASE_URL")]

    # Figma REST API
    figma_api_base_url: str = Field(
        default="https://api.figma.com/v1", alias="FIGMA_API_BASE_URL"
    )
    figma_file_timeout_s: float = Field(default=30.0, alias="FIGMA_FILE_TIMEOUT_S")
    figma_nodes_timeout_s: float = Field(default=15.0, alias="FIGMA_NODES_TIMEOUT_S")
    # Must not exceed the file timeout
    figma_variables_timeout_s: float = Field(default=10.0, alias="FIGMA_VARIABLES_TIMEOUT_S")

    # Extraction and sync limits
    style_node_fetch_limit: int = Field(default=10, alias="STYLE_NODE_FETCH_LIMIT")
    token_insert_batch_size: int = Field(default=50, alias="TOKEN_INSERT_BATCH_SIZE")

    # Logging
    log_json: bool = Field(default=True, alias="LOG_JSON")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Reject limits outside the supported ranges."""
        if not 1 <= self.style_node_fetch_limit <= 100:
            raise ValueError("STYLE_NODE_FETCH_LIMIT must be between 1 and 100")
        if not 1 <= self.token_insert_batch_size <= 1000:
            raise ValueError("TOKEN_INSERT_BATCH_SIZE must be between 1 and 1000")

        timeouts = {
            "FIGMA_FILE_TIMEOUT_S": self.figma_file_timeout_s,
            "FIGMA_NODES_TIMEOUT_S": self.figma_nodes_timeout_s,
            "FIGMA_VARIABLES_TIMEOUT_S": self.figma_variables_timeout_s,
        }
        for name, value in timeouts.items():
            if value <= 0:
                raise ValueError(f"{name} must be > 0")
        if self.figma_variables_timeout_s > self.figma_file_timeout_s:
            raise ValueError("FIGMA_VARIABLES_TIMEOUT_S must not exceed FIGMA_FILE_TIMEOUT_S")

        return self

    @property
    def normalized_api_base_url(self) -> str:
        """Return the API base URL with trailing slash stripped."""
        return self.figma_api_base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If required settings are missing or invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
