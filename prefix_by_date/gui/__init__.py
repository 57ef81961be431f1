"""
gui - PySide6 review window for the date prefix tool
"""

from .gui_entry import main

__all__ = ["main"]
