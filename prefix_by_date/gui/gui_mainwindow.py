"""
gui_mainwindow.py - GUI Main Window

Lists every path of the batch and asks for a decision on each rename
plan, in input order. Paths without match can be named by hand
"""

from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QTableWidget, QTableWidgetItem,
    QProgressBar, QMessageBox, QHeaderView, QGroupBox, QListWidget, QListWidgetItem
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QColor

from ..core import (
    Decision, RenamePlan, RenamePlanner, RenameResult, Review, ReviewSession, Unmatched,
)
from ..core.plan_rename import PlanItem
from .gui_workers import PlanWorker

STATUS_COLORS = {
    "Renamed": QColor(0, 150, 0),
    "Failed": QColor(200, 0, 0),
    "Refused": QColor(150, 150, 150),
    "Skipped": QColor(150, 150, 150),
    "No Match": QColor(150, 150, 150),
    "Conflict": QColor(200, 150, 0),
    "Reviewing": QColor(0, 0, 200),
}

# (label, decision, uses the edited name)
BUTTONS = [
    ("Accept", Decision.ACCEPT, True),
    ("Always", Decision.ALWAYS, True),
    ("Skip", Decision.SKIP, False),
    ("Refuse", Decision.REJECT, False),
    ("Ignore", Decision.IGNORE, False),
    ("Abort", Decision.ABORT, False),
]


class MainWindow(QMainWindow):
    """Review window"""

    def __init__(self, planner: RenamePlanner, paths: List[Path], applier=None):
        super().__init__()
        self.setWindowTitle("Prefix by Date")
        self.setMinimumSize(800, 600)

        self.planner = planner
        self.paths = paths
        self.applier = applier
        self.items: List[PlanItem] = []
        self.rows: Dict[Path, int] = {}
        self.session: Optional[ReviewSession] = None
        self.current: Optional[PlanItem] = None
        self.plan_worker: Optional[PlanWorker] = None

        self._init_ui()

    @property
    def result(self) -> Optional[RenameResult]:
        return self.session.result if self.session else None

    def _init_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        # Results table
        self.table = QTableWidget()
        self.table.setColumnCount(4)
        self.table.setHorizontalHeaderLabels(["Original Name", "New Name", "Matcher", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(3, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        layout.addWidget(self.table, 1)

        # Current plan group
        review_group = QGroupBox("Current Rename")
        review_layout = QGridLayout(review_group)

        review_layout.addWidget(QLabel("Original:"), 0, 0)
        self.source_label = QLabel("")
        review_layout.addWidget(self.source_label, 0, 1)

        review_layout.addWidget(QLabel("New name:"), 1, 0)
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Edit the new name before accepting")
        review_layout.addWidget(self.name_edit, 1, 1)

        self.conflict_label = QLabel("")
        self.conflict_label.setStyleSheet("QLabel { color: #c89600; }")
        review_layout.addWidget(self.conflict_label, 2, 0, 1, 2)

        review_layout.addWidget(QLabel("Alternatives:"), 3, 0, Qt.AlignmentFlag.AlignTop)
        self.alternatives_list = QListWidget()
        self.alternatives_list.setMaximumHeight(90)
        self.alternatives_list.itemClicked.connect(self._on_alternative_clicked)
        review_layout.addWidget(self.alternatives_list, 3, 1)

        buttons_layout = QHBoxLayout()
        self.buttons: List[QPushButton] = []
        for label, decision, edited in BUTTONS:
            button = QPushButton(label)
            button.clicked.connect(lambda checked=False, d=decision, e=edited: self._decide(d, e))
            buttons_layout.addWidget(button)
            self.buttons.append(button)
        review_layout.addLayout(buttons_layout, 4, 0, 1, 2)

        layout.addWidget(review_group)

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

        self._set_buttons_enabled(False)
        self.statusBar().showMessage("Ready")

    def _set_buttons_enabled(self, enabled: bool, rescue: bool = False):
        # A path without match can only be named, skipped or abort the review
        for button, (_, decision, _) in zip(self.buttons, BUTTONS):
            allowed = decision in (Decision.ACCEPT, Decision.SKIP, Decision.ABORT) or not rescue
            button.setEnabled(enabled and allowed)
        self.name_edit.setEnabled(enabled)
        self.alternatives_list.setEnabled(enabled and not rescue)

    def start(self):
        """Build plans in the background"""
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, max(len(self.paths), 1))
        self.status_label.setText("Generating rename plans...")

        self.plan_worker = PlanWorker(self.planner, self.paths)
        self.plan_worker.progress.connect(self._on_plan_progress)
        self.plan_worker.finished.connect(self._on_plan_finished)
        self.plan_worker.error.connect(self._on_plan_error)
        self.plan_worker.start()

    @Slot(int, int, str)
    def _on_plan_progress(self, current: int, total: int, msg: str):
        self.progress_bar.setValue(current)
        self.status_label.setText(f"Processing {current}/{total}: {msg}")

    @Slot(list)
    def _on_plan_finished(self, items: List[PlanItem]):
        """Plan generation complete"""
        self.progress_bar.setVisible(False)
        self.items = items
        self.session = ReviewSession(items, applier=self.applier, planner=self.planner, rescue=True)

        self.table.setRowCount(len(items))
        for i, item in enumerate(items):
            self.rows[item.source_path] = i
            self.table.setItem(i, 0, QTableWidgetItem(item.source_path.name))
            if isinstance(item, RenamePlan):
                self.table.setItem(i, 1, QTableWidgetItem(item.target_path.name))
                self.table.setItem(i, 2, QTableWidgetItem(item.matcher_name))
            else:
                self.table.setItem(i, 1, QTableWidgetItem(""))
                self.table.setItem(i, 2, QTableWidgetItem(""))

        self._advance()

    @Slot(str)
    def _on_plan_error(self, error: str):
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Failed to generate rename plans: {error}")

    def _advance(self):
        """Show the next plan needing a decision"""
        self.current = self.session.next_plan()
        self._refresh_statuses()

        if self.current is None:
            self._finish()
            return

        item = self.current
        self.source_label.setText(str(item.source_path))
        self.alternatives_list.clear()
        if isinstance(item, Unmatched):
            self.name_edit.setText("")
            self.name_edit.setPlaceholderText("No match, type a name to rename this path")
            self.conflict_label.setText("")
            self._set_buttons_enabled(True, rescue=True)
        else:
            self.name_edit.setText(item.target_path.name)
            self.name_edit.setPlaceholderText("Edit the new name before accepting")
            self.conflict_label.setText(
                f"Conflict: {item.target_path.name} is already taken" if item.conflict else ""
            )
            for alt in self.session.alternatives():
                entry = QListWidgetItem(f"{alt.target_path.name}  ({alt.matcher_name})")
                entry.setData(Qt.ItemDataRole.UserRole, alt.target_path.name)
                if alt.conflict:
                    entry.setForeground(STATUS_COLORS["Conflict"])
                self.alternatives_list.addItem(entry)
            self._set_buttons_enabled(True)
        self.table.selectRow(self.rows[item.source_path])
        self.status_label.setText(f"Reviewing {self.session.position + 1}/{self.session.total}")

    @Slot(QListWidgetItem)
    def _on_alternative_clicked(self, entry: QListWidgetItem):
        self.name_edit.setText(entry.data(Qt.ItemDataRole.UserRole))

    def _decide(self, decision: Decision, edited: bool):
        if self.current is None:
            return

        new_name = self.name_edit.text().strip() if edited else None
        try:
            settled = self.session.decide(Review(decision, new_name or None))
        except ValueError as e:
            QMessageBox.warning(self, "Warning", str(e))
            return

        if isinstance(settled, RenamePlan):
            row = self.rows[settled.source_path]
            self.table.setItem(row, 1, QTableWidgetItem(settled.target_path.name))
            self.table.setItem(row, 2, QTableWidgetItem(settled.matcher_name))
        self._advance()

    def _status_of(self, item: PlanItem) -> str:
        result = self.session.result
        source = item.source_path
        if any(p.source_path == source for p in result.applied):
            return "Renamed"
        if any(p.source_path == source for p, _ in result.failed):
            return "Failed"
        if any(p.source_path == source for p in result.rejected):
            return "Refused"
        if any(p.source_path == source for p in result.skipped):
            return "Skipped"
        if self.current is not None and self.current.source_path == source:
            return "Reviewing"
        if isinstance(item, Unmatched):
            return "No Match"
        if result.aborted:
            return "Discarded"
        return "Conflict" if item.conflict else "Pending"

    def _refresh_statuses(self):
        for item in self.items:
            status = self._status_of(item)
            status_item = QTableWidgetItem(status)
            if status in STATUS_COLORS:
                status_item.setForeground(STATUS_COLORS[status])
            self.table.setItem(self.rows[item.source_path], 3, status_item)

    def _finish(self):
        """Review complete"""
        self._set_buttons_enabled(False)
        self.source_label.setText("")
        self.name_edit.setText("")
        self.conflict_label.setText("")
        self.alternatives_list.clear()

        result = self.session.result
        msg = f"Rename complete!\n\nRenamed: {result.applied_count}\nFailed: {result.failed_count}"
        if result.failed_count > 0:
            msg += "\n\nFailure Details:\n"
            for plan, error in result.failed[:5]:
                msg += f"  {plan.source_path.name}: {error}\n"
            if len(result.failed) > 5:
                msg += f"  ... and {len(result.failed) - 5} more failures"

        self.status_label.setText("Complete")
        self.statusBar().showMessage("Complete")
        if self.items:
            QMessageBox.information(self, "Complete", msg)
