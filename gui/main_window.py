"""
Main Window - KnockoutDesk Console

The operator's control panel for running a knockout competition.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QToolBar, QStatusBar, QLabel, QMessageBox, QFileDialog
)
from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtGui import QAction, QKeySequence

from config import APP_NAME, PATHS, UI_SETTINGS
from gui.widgets.tournament_bracket import TournamentBracketWidget
from services.event_bus import EventBus


EXPORT_FILTERS = {
    "png": "PNG image (*.png)",
    "pdf": "PDF document (*.pdf)",
    "csv": "CSV file (*.csv)",
}


class MainWindow(QMainWindow):
    """
    Primary KnockoutDesk console.

    Bracket actions go straight to the controller through the bracket
    widget; whole-competition actions are raised as signals for the
    application controller.
    """

    generate_requested = Signal()
    reload_requested = Signal()
    export_requested = Signal(str, str)  # format, filepath

    def __init__(self, event_bus: EventBus):
        super().__init__()
        self.event_bus = event_bus
        self.tournament = None

        self.setWindowTitle(f"{APP_NAME} - Knockout Console")
        self.setMinimumSize(UI_SETTINGS.min_width, UI_SETTINGS.min_height)

        self.bracket_widget = TournamentBracketWidget(event_bus, self)
        self.bracket_widget.export_requested.connect(self._choose_export_path)
        self.setCentralWidget(self.bracket_widget)

        # Build UI
        self._build_toolbar()
        self._build_statusbar()
        self._connect_signals()

    def _build_toolbar(self) -> None:
        tb = QToolBar("Bracket")
        tb.setObjectName("bracket_toolbar")
        tb.setMovable(False)
        tb.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.ToolBarArea.TopToolBarArea, tb)

        self.action_generate = QAction("Generate Bracket", self)
        self.action_generate.setShortcut(QKeySequence("Ctrl+G"))
        self.action_generate.triggered.connect(self._confirm_generate)
        tb.addAction(self.action_generate)

        self.action_reload = QAction("Reload", self)
        self.action_reload.setShortcut(QKeySequence("F5"))
        self.action_reload.triggered.connect(self.reload_requested.emit)
        tb.addAction(self.action_reload)

    def _build_statusbar(self) -> None:
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

        self.status_version = QLabel("")
        self.status_bar.addPermanentWidget(self.status_version)

    def _connect_signals(self) -> None:
        self.event_bus.system_message.connect(self._on_system_message)
        self.event_bus.bracket_saved.connect(self._on_bracket_saved)
        self.event_bus.tournament_completed.connect(self._on_tournament_completed)
        self.event_bus.database_error.connect(self._on_database_error)

    def set_tournament(self, tournament_bracket) -> None:
        self.tournament = tournament_bracket
        self.bracket_widget.set_tournament(tournament_bracket)

    def _confirm_generate(self) -> None:
        """Ask before replacing an existing draw."""
        if self.tournament is not None and self.tournament.has_bracket:
            reply = QMessageBox.question(
                self,
                "Replace Bracket",
                "Generating a new bracket discards all placements and results. Continue?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No
            )
            if reply == QMessageBox.StandardButton.No:
                return
        self.generate_requested.emit()

    @Slot(str)
    def _choose_export_path(self, fmt: str) -> None:
        default = str(PATHS.exports / f"bracket.{fmt}")
        filepath, _ = QFileDialog.getSaveFileName(
            self, f"Export {fmt.upper()}", default, EXPORT_FILTERS[fmt]
        )
        if filepath:
            self.export_requested.emit(fmt, filepath)

    def show_error(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    @Slot(str, str)
    def _on_system_message(self, level: str, message: str) -> None:
        """Display system message in status bar."""
        self.status_bar.showMessage(f"[{level.upper()}] {message}", 5000)

    @Slot(int, int)
    def _on_bracket_saved(self, competition_id: int, version: int) -> None:
        self.status_version.setText(f"Competition {competition_id} · v{version}")

    @Slot(dict)
    def _on_tournament_completed(self, result: dict) -> None:
        name: Optional[str] = result.get("winner_team_name")
        self.status_bar.showMessage(f"Champion: {name}")
        QMessageBox.information(self, "Tournament Complete", f"{name} wins the tournament.")

    @Slot(str)
    def _on_database_error(self, message: str) -> None:
        self.show_error("Database Error", message)
