"""Configuration management for the feed pipeline."""

from .loader import Config, load_config, load_feeds, save_config, save_feeds
from .models import (
    ConfigModel,
    FeedConfig,
    IngestionConfig,
    LoggingConfig,
    PostgresConfig,
    ReaderConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "FeedConfig",
    "IngestionConfig",
    "LoggingConfig",
    "PostgresConfig",
    "ReaderConfig",
    "load_config",
    "load_feeds",
    "save_config",
    "save_feeds",
]
