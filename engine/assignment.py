"""
Slot Assignment Engine

Operator edits to bracket slots. A team is never left in two unresolved
slots: assigning it somewhere moves it there.
"""

from datetime import datetime
from typing import Optional, Union

from engine.bracket import Bracket, MatchStatus, Side
from engine.errors import InvalidSlotTeam, LockedMatchMutation
from engine.propagation import place_team, retract_winner


def assign(
    bracket: Bracket,
    match_id: int,
    side: Union[Side, str],
    team_id: Optional[int],
) -> Bracket:
    """
    Put a team into a slot, or clear the slot when ``team_id`` is None.

    Clearing is always allowed. On a decided match it withdraws the result
    and pulls the former winner back out of later rounds.

    Raises:
        UnknownMatch: no such match
        InvalidSlotTeam: the team is not registered in the bracket
        LockedMatchMutation: the match already has a winner
    """
    match = bracket.get_match(match_id)
    side = Side(side)

    if team_id is None:
        clear_slot(bracket, match_id, side)
        return bracket

    if bracket.teams and team_id not in bracket.teams:
        raise InvalidSlotTeam(
            match_id, team_id, f"Team {team_id} is not registered in this bracket"
        )

    if match.team_in(side) == team_id:
        return bracket

    if match.is_decided:
        raise LockedMatchMutation(match_id)

    place_team(bracket, match, side, team_id)
    return bracket


def clear_slot(bracket: Bracket, match_id: int, side: Union[Side, str]) -> Bracket:
    """Empty one slot of a match."""
    match = bracket.get_match(match_id)
    side = Side(side)

    if match.team_in(side) is None:
        return bracket

    match.set_team(side, None)
    retract_winner(bracket, match)
    return bracket


def schedule_match(bracket: Bracket, match_id: int, scheduled_at: Optional[datetime]) -> Bracket:
    """Set or remove the planned start of an undecided match."""
    match = bracket.get_match(match_id)
    if match.is_decided:
        raise LockedMatchMutation(match_id, "is already decided and cannot be rescheduled")

    match.scheduled_at = scheduled_at
    match.status = MatchStatus.SCHEDULED if scheduled_at else MatchStatus.PENDING
    return bracket


def link_game(bracket: Bracket, match_id: int, game_id: Optional[int]) -> Bracket:
    """Attach the played game record to a bracket match."""
    match = bracket.get_match(match_id)
    match.game_id = game_id
    if game_id is not None and match.status in (MatchStatus.PENDING, MatchStatus.SCHEDULED):
        match.status = MatchStatus.IN_PROGRESS
    return bracket
