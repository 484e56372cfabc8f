"""League settings from league_config.json.

The bundled data/ directory is used unless BADQB_DATA_DIR points elsewhere.
"""

import os
from functools import lru_cache
from pathlib import Path

from .schemas import LeagueConfig
from .utils import load_json, save_json

CONFIG_FILENAME = 'league_config.json'
DEFAULT_DATA_DIR = Path(__file__).parent.parent / 'data'


def default_data_dir() -> Path:
    return Path(os.environ.get('BADQB_DATA_DIR', DEFAULT_DATA_DIR))


def load_config(path: Path | str) -> LeagueConfig:
    """Read and validate one league_config.json (not cached)."""
    return load_json(path, schema=LeagueConfig)


def save_config(config: LeagueConfig, path: Path | str) -> None:
    """Write settings back, e.g. after a stats import advances the current week."""
    save_json(path, config)
    clear_config_cache()


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Settings for the default league data directory, read once per process.

    Raises:
        FileNotFoundError: If league_config.json doesn't exist
        ValueError: If it fails LeagueConfig validation

    Example:
        from badqb.config import get_config
        config = get_config()
        weeks = range(1, config.total_weeks + 1)
    """
    return load_config(default_data_dir() / CONFIG_FILENAME)


def get_current_season() -> int:
    return get_config().season


def get_current_week() -> int:
    """Next week awaiting stats."""
    return get_config().current_week


def get_total_weeks() -> int:
    return get_config().total_weeks


def get_week_range() -> range:
    """Weeks 1..total_weeks."""
    return range(1, get_total_weeks() + 1)


def get_locked_weeks() -> list[int]:
    """Weeks whose lineups may no longer be edited."""
    return get_config().locked_weeks


def is_week_locked(week: int) -> bool:
    return week in get_locked_weeks()


def clear_config_cache() -> None:
    """Forget the cached settings so the next get_config() re-reads the file."""
    get_config.cache_clear()
