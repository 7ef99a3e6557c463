"""Configuration management for Wellplan."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.recurrence import DEFAULT_COUNT, MAX_OCCURRENCES

logger = logging.getLogger(__name__)

WELLPLAN_HOME = Path(os.environ.get("WELLPLAN_HOME", Path.home() / "wellplan"))
CONFIG_FILE = WELLPLAN_HOME / "config" / "wellplan.conf"
DATA_DIR = WELLPLAN_HOME / "data"


@dataclass
class Config:
    """Wellplan configuration."""

    data_dir: str = ""
    owner_id: str = ""
    default_count: int = DEFAULT_COUNT
    max_occurrences: int = MAX_OCCURRENCES

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    @property
    def presets_dir(self) -> Path:
        return self.data_path / "presets"

    @property
    def activities_dir(self) -> Path:
        return self.data_path / "activities"


def _parse_positive_int(key: str, value: str) -> int | None:
    try:
        number = int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key.upper()}: {value!r}")
        return None
    if number <= 0:
        logger.warning(f"Ignoring non-positive {key.upper()}: {number}")
        return None
    return number


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from wellplan.conf file."""
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
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "data_dir":
                config.data_dir = value
            case "owner_id":
                config.owner_id = value
            case "default_count":
                number = _parse_positive_int(key, value)
                if number is not None:
                    config.default_count = number
            case "max_occurrences":
                number = _parse_positive_int(key, value)
                if number is not None:
                    config.max_occurrences = number
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
