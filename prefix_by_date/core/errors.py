"""
errors.py - Exceptions raised by the core
"""

from pathlib import Path
from typing import Optional


class PrefixByDateError(Exception):
    """Base error for the project."""


class ConfigError(PrefixByDateError):
    """Invalid configuration, fatal before any path is processed"""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        if key:
            message = f"{key}: {message}"
        super().__init__(message)


class RenameError(PrefixByDateError):
    """Applying a plan failed"""

    def __init__(self, source: Path, target: Path, reason: str):
        self.source = source
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot rename {source} to {target.name}: {reason}")
