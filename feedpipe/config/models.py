"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_USER_AGENT = "feedpipe/0.1 (RSS Reader)"
DEFAULT_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml"


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("feedpipe", description="Database name")
    user: str = Field("feedpipe", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class IngestionConfig(BaseModel):
    """Fetch and scheduling parameters for batch runs."""

    timeout_seconds: float = Field(30.0, description="Per-feed fetch timeout", gt=0)
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header for feed requests")
    accept: str = Field(DEFAULT_ACCEPT, description="Accept header for feed requests")
    fetch_interval_minutes: int = Field(
        60, description="Minutes between a feed's fetch and its next scheduled fetch", ge=1
    )
    max_concurrent: int = Field(3, description="Feeds processed at once (1 = sequential)", ge=1, le=10)


class ReaderConfig(BaseModel):
    """Read path defaults."""

    default_limit: int = Field(20, ge=1, le=1000)
    max_limit: int = Field(100, ge=1, le=1000)
    unknown_feed_name: str = Field("Unknown Feed", description="Name shown for missing feeds")

    @field_validator("max_limit")
    @classmethod
    def validate_max_limit(cls, v: int, info) -> int:
        """Ensure the default page size fits under the cap."""
        default_limit = info.data.get("default_limit", 20)
        if v < default_limit:
            raise ValueError(f"max_limit ({v}) must be >= default_limit ({default_limit})")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Minimum log level")
    json_output: bool = Field(False, alias="json", description="Render log events as JSON")

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and check the level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class FeedConfig(BaseModel):
    """Feed declaration from feeds.yaml."""

    name: str = Field(..., description="Display name")
    url: str = Field(..., description="RSS/Atom feed URL")
    is_active: bool = Field(True, description="Whether the feed is polled")
