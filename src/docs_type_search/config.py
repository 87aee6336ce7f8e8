"""Centralized configuration for docs-type-search using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Every field can be set with a ``DOCS_TYPE_SEARCH_`` prefixed variable, e.g.
    ``DOCS_TYPE_SEARCH_MAX_RESULTS=20``, or from a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCS_TYPE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Ranking
    max_results: int = Field(default=50, ge=1, description="Maximum ranked entries returned per query")
    name_search_includes_types: bool = Field(
        default=True,
        description="Let name searches also match the rendered type of an entry",
    )

    # Indexing
    eager_parse: bool = Field(
        default=False,
        description="Parse every signature when a package is indexed instead of on first ranking",
    )
    parse_workers: int = Field(default=4, ge=1, description="Threads used when warming parsed signatures")

    # Telemetry
    service_name: str = Field(default="docs-type-search", description="Service name for traces and metrics")

