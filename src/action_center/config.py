"""Configuration management for Action Center."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.triage import SCHEDULED_ORDERS

logger = logging.getLogger(__name__)

ACTION_CENTER_HOME = Path(os.environ.get("ACTION_CENTER_HOME", Path.home() / "action-center"))
CONFIG_FILE = ACTION_CENTER_HOME / "config" / "action-center.conf"
DATA_DIR = ACTION_CENTER_HOME / "data"


@dataclass
class Config:
    """Action Center configuration."""

    db_path: str = ""
    timezone: str = ""
    scheduled_sort: str = "closest"
    default_project: str = "Inbox"

    @property
    def database(self) -> Path:
        """Resolved SQLite path."""
        if self.db_path:
            return Path(self.db_path).expanduser()
        return DATA_DIR / "action-center.db"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from action-center.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "db_path":
                config.db_path = value
            case "timezone":
                config.timezone = value
            case "scheduled_sort":
                if value in SCHEDULED_ORDERS:
                    config.scheduled_sort = value
                else:
                    logger.warning(f"Ignoring invalid SCHEDULED_SORT: {value}")
            case "default_project":
                if value:
                    config.default_project = value
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
