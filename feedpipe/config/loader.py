"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml
from pydantic import ValidationError

from .models import ConfigModel, FeedConfig

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "FEEDPIPE_CONFIG"


def default_config_path() -> Path:
    """Config path from the environment, else the per-user default."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "feedpipe" / "config.yaml"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = default_config_path()
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def feeds_path(self) -> Path:
        """Path of the feeds declaration file."""
        return self.config_path.parent / "feeds.yaml"

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_feeds(feeds_path: Path) -> List[FeedConfig]:
    """Load feed declarations from YAML file, skipping invalid entries."""
    if not feeds_path.exists():
        raise FileNotFoundError(f"Feeds file not found: {feeds_path}")

    try:
        with open(feeds_path) as f:
            feeds_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in feeds file: {e}")

    if feeds_data is None or "feeds" not in feeds_data:
        return []

    feeds = []
    for feed_data in feeds_data["feeds"]:
        try:
            feeds.append(FeedConfig(**feed_data))
        except ValidationError as e:
            logger.warning("feed_declaration_skipped", name=feed_data.get("name"), error=str(e))
            continue
    return feeds


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(by_alias=True), f, default_flow_style=False, sort_keys=False)


def save_feeds(feeds: List[FeedConfig], feeds_path: Path) -> None:
    """Save feed declarations to YAML file."""
    feeds_path.parent.mkdir(parents=True, exist_ok=True)

    feeds_data = {"feeds": [feed.model_dump() for feed in feeds]}

    with open(feeds_path, "w") as f:
        yaml.dump(feeds_data, f, default_flow_style=False, sort_keys=False)
