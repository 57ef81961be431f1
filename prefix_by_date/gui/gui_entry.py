"""
gui_entry.py - GUI Entry

Launch the PySide6 review window
"""

import sys
from pathlib import Path
from typing import List

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from ..core import DryRunApplier, RenamePlanner
from .gui_mainwindow import MainWindow


def main(planner: RenamePlanner, paths: List[Path], dry_run: bool = False) -> int:
    """
    GUI main entry

    Args:
        planner: Planner built from the merged configuration
        paths: Paths to process
        dry_run: Log renames instead of performing them

    Returns:
        0 when every accepted rename succeeded, 1 otherwise
    """
    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Prefix by Date")
    app.setApplicationVersion("1.0.0")
    app.setStyle("Fusion")

    window = MainWindow(planner, paths, applier=DryRunApplier() if dry_run else None)
    window.show()
    window.start()

    app.exec()

    result = window.result
    if result is None:
        return 1
    print(result.summary())
    return 0 if result.failed_count == 0 else 1
