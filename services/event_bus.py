"""
Event Bus - Central signal hub for inter-module communication.

All modules connect to this single object rather than directly to each other,
keeping the bracket controller, persistence and GUI loosely coupled.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for KnockoutDesk.

    The EventBus acts as a mediator between application components:
    - TournamentBracket emits bracket changes
    - GUI components listen and redraw
    - The application controller persists after each change

    Usage:
        # In the application controller
        controller.match_completed.connect(event_bus.match_completed.emit)

        # In a view
        event_bus.bracket_updated.connect(self._on_bracket_updated)
    """

    # ============ Bracket Lifecycle ============
    bracket_generated = Signal(dict)      # {competition_id, total_rounds, total_matches}
    bracket_loaded = Signal(int)          # competition_id
    bracket_updated = Signal()            # any change; views recompute layout
    bracket_saved = Signal(int, int)      # competition_id, version

    # ============ Match Events ============
    team_assigned = Signal(dict)          # {match_id, side, team_id}
    match_completed = Signal(dict)        # match details
    tournament_completed = Signal(dict)   # {winner_team_id, winner_team_name, ...}

    # ============ Export Events ============
    bracket_exported = Signal(str)        # filepath

    # ============ System Events ============
    database_error = Signal(str)          # Database error message
    system_message = Signal(str, str)     # (level, message) - e.g., ("info", "Bracket saved")

    def __init__(self):
        super().__init__()

    def connect_bracket(self, controller) -> None:
        """Relay a TournamentBracket controller's signals."""
        controller.bracket_generated.connect(self.bracket_generated.emit)
        controller.team_assigned.connect(self.team_assigned.emit)
        controller.match_completed.connect(self.match_completed.emit)
        controller.tournament_completed.connect(self.tournament_completed.emit)
        controller.bracket_updated.connect(self.bracket_updated.emit)

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
