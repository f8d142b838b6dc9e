"""Configuration for TradeFlow.

Settings live in ``~/.config/tradeflow/config.toml``. A few of them can be
overridden with environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml

from tradeflow.db.store import DataStore

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "tradeflow"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "tradeflow.db"

DEFAULT_RISK_PERCENT = 1.0
DEFAULT_PAIR = "EURUSD"


def get_config_path() -> Path:
    """Config file location, honoring TRADEFLOW_CONFIG."""
    override = os.environ.get("TRADEFLOW_CONFIG")
    return Path(override) if override else CONFIG_PATH


def load_config(config_path: Optional[Path] = None) -> Optional[dict]:
    """Load the configuration file.

    Args:
        config_path: Optional path, defaults to get_config_path().

    Returns:
        Config dict, or None if the file is missing or unreadable.
    """
    path = config_path or get_config_path()

    if not path.exists():
        return None

    try:
        return toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Could not read config %s: %s", path, e)
        return None


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Write a template configuration file.

    Returns:
        Path of the written file.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "account": {
            "balance": 0.0,
            "risk_percent": DEFAULT_RISK_PERCENT,
            "default_pair": DEFAULT_PAIR,
        },
        "calendar": {
            "api_key": "",  # Leave empty to use FMP_API_KEY env var
            "timezone": "",  # Empty uses the system time zone
        },
        "storage": {
            "db_path": str(DEFAULT_DB_PATH),
        },
    }

    with open(path, "w") as f:
        toml.dump(template, f)

    return path


def get_db_path(config: Optional[dict] = None) -> Path:
    """Database location: TRADEFLOW_DB_PATH, then config, then default."""
    override = os.environ.get("TRADEFLOW_DB_PATH")
    if override:
        return Path(override)
    configured = (config or {}).get("storage", {}).get("db_path")
    return Path(configured).expanduser() if configured else DEFAULT_DB_PATH


def get_data_store(config: Optional[dict] = None) -> DataStore:
    return DataStore(get_db_path(config))


def get_calendar_api_key(config: Optional[dict] = None) -> Optional[str]:
    """Financial Modeling Prep key: FMP_API_KEY first, then the config file."""
    api_key = os.environ.get("FMP_API_KEY")
    if not api_key:
        api_key = (config or {}).get("calendar", {}).get("api_key")
    return api_key or None


def get_timezone(config: Optional[dict] = None) -> Optional[str]:
    return (config or {}).get("calendar", {}).get("timezone") or None


def get_account_settings(config: Optional[dict] = None) -> dict:
    """Account defaults used by the position size calculator.

    Returns:
        Dictionary with balance (None when unset), risk_percent, default_pair.
    """
    account = (config or {}).get("account", {})
    balance = account.get("balance")
    return {
        "balance": balance if balance else None,
        "risk_percent": account.get("risk_percent", DEFAULT_RISK_PERCENT),
        "default_pair": account.get("default_pair", DEFAULT_PAIR),
    }
