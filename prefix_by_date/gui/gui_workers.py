"""
gui_workers.py - GUI Worker Threads

Builds rename plans in the background to avoid blocking the UI
"""

from pathlib import Path
from typing import Optional, List

from PySide6.QtCore import QThread, Signal, QObject

from ..core import RenamePlanner


class PlanWorker(QThread):
    """Rename plan generation worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(list)             # List of RenamePlan / Unmatched
    error = Signal(str)                 # Error message

    def __init__(
        self,
        planner: RenamePlanner,
        paths: List[Path],
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.planner = planner
        self.paths = paths

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            items = self.planner.build_plans(self.paths, progress_callback=progress_callback)
            self.finished.emit(items)
        except Exception as e:
            self.error.emit(str(e))
