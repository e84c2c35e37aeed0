"""
KnockoutDesk Application Controller

Top-level controller that wires together all application components.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject
from sqlalchemy.exc import SQLAlchemyError

from engine.errors import BracketError
from engine.tournament_bracket import TournamentBracket
from models.base import get_session
from services.bracket_repository import (
    BracketNotFound, BracketRepository, StaleBracketError
)
from services.event_bus import EventBus
from services.export import BracketExporter


logger = logging.getLogger(__name__)


class KnockoutDeskApp(QObject):
    """
    Top-level application controller.

    Loads the competition's bracket, saves it after every change, and
    routes window requests (generate, reload, export) to the services.
    """

    def __init__(self, competition_id: int):
        super().__init__()
        self.competition_id = competition_id
        self.version: Optional[int] = None
        self._suspend_save = False

        # Core services
        self.event_bus = EventBus()
        self.exporter = BracketExporter()

        self.tournament = TournamentBracket(competition_id=competition_id)
        self.event_bus.connect_bracket(self.tournament)
        self.tournament.bracket_updated.connect(self._save)

        # Create main window
        from gui.main_window import MainWindow
        self.main_window = MainWindow(self.event_bus)
        self.main_window.generate_requested.connect(self.generate)
        self.main_window.reload_requested.connect(self.reload)
        self.main_window.export_requested.connect(self.export)
        self.main_window.set_tournament(self.tournament)

    def show(self) -> None:
        """Show the main application window."""
        self.main_window.show()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def reload(self) -> None:
        """Replace the in-memory bracket with the stored one."""
        try:
            with get_session() as session:
                repo = BracketRepository(session)
                try:
                    bracket, version = repo.load_bracket(self.competition_id)
                except BracketNotFound:
                    self.version = repo.bracket_version(self.competition_id)
                    logger.info("Competition %s has no bracket yet", self.competition_id)
                    self.event_bus.emit_message("info", "No bracket yet. Generate one to begin.")
                    return
        except LookupError as e:
            logger.error("%s", e)
            self.event_bus.database_error.emit(str(e))
            return
        except (SQLAlchemyError, BracketError) as e:
            logger.exception("Could not load bracket for competition %s", self.competition_id)
            self.event_bus.database_error.emit(str(e))
            return

        self.version = version
        self._suspend_save = True
        try:
            self.tournament.load(bracket)
        finally:
            self._suspend_save = False
        self.event_bus.bracket_loaded.emit(self.competition_id)
        self.event_bus.emit_message("info", f"Bracket loaded (version {version})")

    def generate(self) -> None:
        """Draw a new bracket from the registered teams."""
        try:
            with get_session() as session:
                teams = BracketRepository(session).list_registered_teams(self.competition_id)
            self.tournament.generate(teams)
        except BracketError as e:
            logger.warning("Bracket generation rejected: %s", e)
            self.main_window.show_error("Cannot Generate Bracket", str(e))
        except (LookupError, SQLAlchemyError) as e:
            logger.exception("Could not read teams for competition %s", self.competition_id)
            self.event_bus.database_error.emit(str(e))

    def _save(self) -> None:
        """Persist the bracket after a change, checked against the loaded version."""
        if self._suspend_save or not self.tournament.has_bracket:
            return
        try:
            with get_session() as session:
                self.version = BracketRepository(session).save_bracket(
                    self.competition_id,
                    self.tournament.bracket,
                    expected_version=self.version,
                )
        except StaleBracketError as e:
            logger.warning("%s", e)
            self.event_bus.emit_message("warning", "Bracket was changed elsewhere; reloaded")
            self.reload()
            return
        except SQLAlchemyError as e:
            logger.exception("Could not save bracket for competition %s", self.competition_id)
            self.event_bus.database_error.emit(str(e))
            return

        self.event_bus.bracket_saved.emit(self.competition_id, self.version)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export(self, fmt: str, filepath: str) -> bool:
        """
        Export the current bracket.

        Args:
            fmt: "png", "pdf" or "csv"
            filepath: Output file path

        Returns:
            True if export successful
        """
        bracket = self.tournament.bracket
        if bracket is None:
            return False

        if fmt == "png":
            ok = self.exporter.export_png(bracket, filepath)
        elif fmt == "pdf":
            ok = self.exporter.export_pdf(bracket, filepath, title=f"Competition {self.competition_id}")
        elif fmt == "csv":
            ok = self.exporter.export_csv(bracket, filepath)
        else:
            raise ValueError(f"Unknown export format: {fmt}")

        if ok:
            self.event_bus.bracket_exported.emit(filepath)
            self.event_bus.emit_message("info", f"Exported {filepath}")
        else:
            self.main_window.show_error("Export Failed", f"Could not write {filepath}")
        return ok
