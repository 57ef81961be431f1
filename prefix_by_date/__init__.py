"""
prefix_by_date - Prefix files by the date found in their name or metadata
"""

__version__ = "1.0.0"
