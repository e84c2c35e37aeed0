"""
KnockoutDesk Bracket Engine

Single-elimination draw, slot assignment, winner propagation and layout.
This package has no GUI, database or I/O dependencies.
"""

from typing import Iterable, Optional, Union

from engine.bracket import Bracket, Match, MatchStatus, Round, Side, Team
from engine.errors import (
    BracketError,
    InsufficientTeams,
    InvalidMatchState,
    InvalidSlotTeam,
    LockedMatchMutation,
    UnknownMatch,
)
from engine.layout import BracketLayout, Connector, LayoutDimensions, LayoutNode
from engine import assignment, draw, layout as _layout, propagation


def generate_bracket(teams: Iterable[Union[Team, dict]], competition_id: Optional[int] = None) -> Bracket:
    """Draw a new bracket from the registered teams."""
    return draw.build(teams, competition_id=competition_id)


def assign_team(
    bracket: Bracket,
    match_id: int,
    side: Union[Side, str],
    team_id: Optional[int],
) -> Bracket:
    """Move a team into a slot, or clear the slot with ``team_id=None``."""
    return assignment.assign(bracket, match_id, side, team_id)


def set_winner(bracket: Bracket, match_id: int, team_id: int) -> Bracket:
    """Record a winner and advance it to the next round."""
    return propagation.set_winner(bracket, match_id, team_id)


def compute_layout(bracket: Bracket, dims: Optional[LayoutDimensions] = None) -> BracketLayout:
    """Geometry for rendering ``bracket``."""
    dims = dims or LayoutDimensions()
    return _layout.layout(
        bracket,
        dims.match_width,
        dims.match_height,
        dims.round_gap_x,
        dims.match_gap_y,
    )


__all__ = [
    "Bracket",
    "Match",
    "MatchStatus",
    "Round",
    "Side",
    "Team",
    "BracketError",
    "InsufficientTeams",
    "InvalidMatchState",
    "InvalidSlotTeam",
    "LockedMatchMutation",
    "UnknownMatch",
    "BracketLayout",
    "Connector",
    "LayoutDimensions",
    "LayoutNode",
    "generate_bracket",
    "assign_team",
    "set_winner",
    "compute_layout",
]
