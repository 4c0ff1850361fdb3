"""
Configuration Loader

Two sources of configuration:

- YAML files under config/ (store defaults, currency tables), with the
  built-in constants as fallback when a file is missing
- The environment, optionally primed from a .env file (credentials, DB path)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .constants import CURRENCY_TO_USD, DEFAULT_NEGATIVE_WORDS, REGION_CURRENCIES

DEFAULT_DB_PATH = "importer.db"
CONFIG_DIR_ENV = "IMPORTER_CONFIG_DIR"


def config_dir_candidates() -> List[Path]:
    """Directories searched for YAML config, in priority order."""
    candidates = []
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        candidates.append(Path(override))
    # Repository checkout: <root>/storefront_importer/common/ -> <root>/config
    candidates.append(Path(__file__).resolve().parents[2] / 'config')
    candidates.append(Path.cwd() / 'config')
    return candidates


def load_config(filename: str) -> Dict[str, Any]:
    """
    Parse a YAML file from the first config directory that has it.

    Raises:
        FileNotFoundError: If no candidate directory contains the file
    """
    searched = []
    for directory in config_dir_candidates():
        path = directory / filename
        if path.is_file():
            with open(path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        searched.append(str(path))
    raise FileNotFoundError(f"{filename} not found (searched: {', '.join(searched)})")


def _load_optional(filename: str) -> Dict[str, Any]:
    """Load a config file, returning {} when it is absent."""
    try:
        return load_config(filename)
    except FileNotFoundError:
        return {}


def load_store_defaults() -> Dict[str, Any]:
    """
    Load default StoreSettings values.

    Returns:
        Dictionary of setting name -> default value (may be empty)
    """
    return _load_optional('store_defaults.yaml').get('store_settings', {})


def load_default_negative_words() -> List[str]:
    """Load the negative words seeded for new shops."""
    words = _load_optional('store_defaults.yaml').get('negative_words')
    return list(words) if words else list(DEFAULT_NEGATIVE_WORDS)


def load_currency_rates() -> Dict[str, float]:
    """
    Load currency -> USD exchange rates.

    Entries in currencies.yaml override the built-in table.

    Example:
        {'USD': 1.0, 'EUR': 1.08, 'GBP': 1.27, ...}
    """
    rates = dict(CURRENCY_TO_USD)
    overrides = _load_optional('currencies.yaml').get('currency_to_usd', {})
    rates.update({code.upper(): float(rate) for code, rate in overrides.items()})
    return rates


def load_region_currencies() -> Dict[str, str]:
    """
    Load region name -> currency code mapping (keys lowercase).

    Example:
        {'united kingdom': 'GBP', 'uk': 'GBP', 'canada': 'CAD', ...}
    """
    regions = dict(REGION_CURRENCIES)
    overrides = _load_optional('currencies.yaml').get('regions', {})
    regions.update({name.lower(): code.upper() for name, code in overrides.items()})
    return regions


@dataclass
class AppConfig:
    """Environment-derived application configuration."""
    shopify_shop: Optional[str] = None
    shopify_access_token: Optional[str] = None
    gemini_api_key: Optional[str] = None
    db_path: str = DEFAULT_DB_PATH


def load_app_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load application config from the environment (and a .env file).

    Args:
        env_file: Optional explicit .env path (default: search from cwd)
    """
    load_dotenv(env_file)
    return AppConfig(
        shopify_shop=os.environ.get("SHOPIFY_SHOP") or None,
        shopify_access_token=os.environ.get("SHOPIFY_ACCESS_TOKEN") or None,
        gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
        db_path=os.environ.get("IMPORTER_DB_PATH") or DEFAULT_DB_PATH,
    )
