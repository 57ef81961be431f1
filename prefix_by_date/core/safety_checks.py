"""
safety_checks.py - Safety Check Module

Provides the checks run before a rename is planned or applied
"""

from pathlib import Path
from typing import Tuple, Optional
import os
import platform

# Windows invalid characters
INVALID_CHARS = '<>:"/\\|?*'

RESERVED_NAMES = {
    'CON', 'PRN', 'AUX', 'NUL',
    'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
    'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
}

MAX_PATH = 260


def is_valid_filename(name: str) -> Tuple[bool, Optional[str]]:
    """
    Check if filename is valid (strictest rules, so names stay portable)

    Args:
        name: Filename

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "Filename cannot be empty"

    for char in INVALID_CHARS:
        if char in name:
            return False, f"Filename contains invalid character: {char}"

    if name.endswith(' ') or name.endswith('.'):
        return False, "Filename cannot end with space or dot"

    if name.upper().split('.')[0] in RESERVED_NAMES:
        return False, f"Filename is a Windows reserved name: {name.upper().split('.')[0]}"

    if len(name) > 255:
        return False, "Filename exceeds 255 characters"

    return True, None


def check_path_length(path: Path, max_length: int = MAX_PATH) -> Tuple[bool, Optional[str]]:
    """Windows refuses paths longer than MAX_PATH"""
    length = len(str(path))
    if length > max_length:
        return False, f"Path too long ({length} > {max_length} characters): {path}"
    return True, None


def check_rename_op(src: Path, dst: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if a single rename operation is safe

    Args:
        src: Source path
        dst: Destination path

    Returns:
        (is_safe, error_reason)
    """
    if not src.exists():
        return False, f"Source does not exist: {src}"

    # On case-insensitive systems a case-only change points at the source itself
    if dst.exists() and not os.path.samefile(src, dst):
        return False, f"Destination already exists: {dst}"
    if dst.is_symlink() and not dst.exists():
        return False, f"Destination already exists: {dst}"

    valid, error = is_valid_filename(dst.name)
    if not valid:
        return False, error

    if platform.system() == "Windows":
        valid, error = check_path_length(dst)
        if not valid:
            return False, error

    if not os.access(src.parent, os.W_OK):
        return False, f"Directory is not writable: {src.parent}"

    return True, None
