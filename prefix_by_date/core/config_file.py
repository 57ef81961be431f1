"""
config_file.py - Config File Discovery and Loading

The configuration lives in <config dir>/config.toml where <config dir> is:
- the directory given on the command line, or
- $PREFIX_BY_DATE_CONFIG when set, or
- $XDG_CONFIG_HOME/prefix-by-date (~/.config/prefix-by-date by default)
"""

from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os
import tomllib

from .models_date import Config
from .config_merge import config_from_table
from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "prefix-by-date"
CONFIG_ENV = "PREFIX_BY_DATE_CONFIG"
CONFIG_FILE = "config.toml"


def config_home() -> Path:
    """Default configuration directory"""
    value = os.environ.get(CONFIG_ENV)
    if value:
        return Path(value)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_NAME


def load_config_file(directory: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the config document

    Args:
        directory: Configuration directory (config_home() when None)

    Returns:
        Parsed document, empty when the file does not exist

    Raises:
        ConfigError: unreadable file or invalid TOML
    """
    path = Path(directory or config_home()) / CONFIG_FILE
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}

    logger.debug("Reading config file %s", path)
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}")


def load_config(directory: Optional[Path] = None) -> Config:
    """Load and merge the configuration of a run"""
    return config_from_table(load_config_file(directory))
