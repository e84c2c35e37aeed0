"""
KnockoutDesk GUI Widgets

Reusable widget components for the bracket console.
"""

from gui.widgets.tournament_bracket import (
    TournamentBracketWidget,
    BracketCanvas,
    TeamRoster,
)

__all__ = [
    "TournamentBracketWidget",
    "BracketCanvas",
    "TeamRoster",
]
