#!/usr/bin/env python3
"""
Prefix by Date - Main Entry

Usage:
    python main.py FILE...               # Rename non-interactively
    python main.py -i text FILE...       # Review each rename in the terminal
    python main.py -i gui FILE...        # Review each rename in a window
"""

import sys

from prefix_by_date.cli import main


if __name__ == "__main__":
    sys.exit(main())
