"""Configuration management for Rapport."""

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

RAPPORT_HOME = Path(os.environ.get("RAPPORT_HOME", Path.home() / "rapport"))
CONFIG_FILE = RAPPORT_HOME / "config" / "rapport.conf"
DATA_DIR = RAPPORT_HOME / "data"


@dataclass
class Config:
    """Rapport configuration."""

    data_dir: str = ""
    user_id: str = "default"
    # IANA zone name for timed events; empty means the machine's local zone
    display_timezone: str = ""

    def resolve_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    def display_tz(self) -> tzinfo | None:
        """Zone for rendering timed occurrences, or None for local time."""
        if not self.display_timezone:
            return None
        try:
            return ZoneInfo(self.display_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown DISPLAY_TIMEZONE '{self.display_timezone}', using local time")
            return None


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from rapport.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "user_id":
                config.user_id = value or config.user_id
            case "display_timezone":
                config.display_timezone = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
