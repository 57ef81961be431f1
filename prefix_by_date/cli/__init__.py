"""
cli - Command Line Interface for the date prefix tool
"""

from .cli_entry import main
from .cli_interactive import interactive_review

__all__ = ["main", "interactive_review"]
