"""
Path Management Module

Provides consistent path handling for the service across development and
production deployments.

Uses platformdirs for reliable Windows/macOS/Linux user directory detection
when running in production (APP_ENV=prod). TRAVEL_SAFETY_DATA_DIR overrides
everything and is what the test suite uses.

Layout:
- Data: sentiment votes (sentiment.json + backup)
- Cache: aggregation cache snapshot (SQLite)
- Logs: runtime log + daily analytics event logs
"""

import os
from pathlib import Path
from typing import Optional

import platformdirs

APP_NAME = "IsItSafe"
APP_AUTHOR = "IsItSafe"


def is_production() -> bool:
    """Check if running with the production profile."""
    return os.environ.get('APP_ENV', '').lower() == 'prod'


def get_runtime_root() -> Path:
    """Project root directory (the directory holding app.py)."""
    return Path(__file__).parent.parent


def _override_dir() -> Optional[Path]:
    override = os.environ.get('TRAVEL_SAFETY_DATA_DIR', '').strip()
    return Path(override) if override else None


def get_data_dir() -> Path:
    """
    Get the data directory for persistent user data (sentiment votes).

    Linux prod: ~/.local/share/IsItSafe
    Development: project's data/ directory
    """
    override = _override_dir()
    if override:
        return override / 'data'
    if is_production():
        return Path(platformdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    return get_runtime_root() / 'data'


def get_cache_dir() -> Path:
    """
    Get the cache directory for the aggregation cache snapshot.

    Linux prod: ~/.cache/IsItSafe
    Development: project's data/ directory
    """
    override = _override_dir()
    if override:
        return override / 'cache'
    if is_production():
        return Path(platformdirs.user_cache_dir(APP_NAME, APP_AUTHOR))
    return get_runtime_root() / 'data'


def get_logs_dir() -> Path:
    """
    Get the logs directory (runtime log and daily analytics logs).

    Linux prod: ~/.local/state/IsItSafe/log
    Development: project's logs/ directory
    """
    override = _override_dir()
    if override:
        return override / 'logs'
    if is_production():
        return Path(platformdirs.user_log_dir(APP_NAME, APP_AUTHOR))
    return get_runtime_root() / 'logs'


def ensure_dirs_exist() -> None:
    """Create the data, cache and logs directories."""
    for dir_path in (get_data_dir(), get_cache_dir(), get_logs_dir()):
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"Warning: Could not create directory {dir_path}: {e}")


def get_sentiment_file() -> Path:
    """Get the path to the community sentiment JSON file."""
    return get_data_dir() / 'sentiment.json'


def get_sentiment_backup_file() -> Path:
    """Get the path to the community sentiment backup file."""
    return get_data_dir() / 'sentiment.backup.json'


def get_aggregation_cache_db() -> Path:
    """Get the path to the aggregation cache snapshot database."""
    return get_cache_dir() / 'aggregation_cache.db'


def get_runtime_log_file() -> Path:
    """Get the path to the runtime log file."""
    return get_logs_dir() / 'runtime.log'
