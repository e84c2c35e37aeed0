"""
Winner Propagation

Records match winners and moves them into the next round. Also owns the
retraction cascade: when a result is withdrawn, the former winner is pulled
out of every later slot it reached, and any later result that depended on
it is cleared too.
"""

from typing import Optional

from engine.bracket import Bracket, Match, MatchStatus, Side
from engine.errors import InvalidMatchState, InvalidSlotTeam


def vacate_team(bracket: Bracket, team_id: int, keep: Optional[tuple[Match, Side]] = None) -> None:
    """Clear every unresolved slot holding ``team_id`` except ``keep``."""
    for match, side in bracket.unresolved_slots_of(team_id):
        if keep is not None and match is keep[0] and side is keep[1]:
            continue
        match.set_team(side, None)


def retract_winner(bracket: Bracket, match: Match) -> None:
    """
    Withdraw the result of ``match``.

    The winner leaves the parent slot it was advanced into. If the parent had
    already been decided, its result is withdrawn as well, all the way up.
    Every reopened match keeps its teams; those teams are cleared from any
    other unresolved slot they were moved into while the match was decided.
    """
    _settle(bracket, _withdraw(bracket, match))


def _settle(bracket: Bracket, matches: list[Match]) -> None:
    for match in matches:
        if match.is_decided:
            continue
        for side in (Side.HOME, Side.AWAY):
            team_id = match.team_in(side)
            if team_id is not None:
                vacate_team(bracket, team_id, keep=(match, side))


def _withdraw(bracket: Bracket, match: Match) -> list[Match]:
    winner = match.winner_team_id
    if winner is None:
        return []

    match.winner_team_id = None
    match.status = MatchStatus.PENDING
    reopened = [match]

    parent, side = bracket.parent_slot(match)
    if parent is not None and parent.team_in(side) == winner:
        reopened.extend(_withdraw(bracket, parent))
        parent.set_team(side, None)
    return reopened


def place_team(bracket: Bracket, match: Match, side: Side, team_id: int) -> None:
    """
    Put ``team_id`` into a slot with move semantics.

    Any other unresolved slot holding the team is cleared first. Replacing a
    team in a decided match withdraws that match's result.
    """
    vacate_team(bracket, team_id, keep=(match, side))
    if match.team_in(side) == team_id:
        return
    match.set_team(side, team_id)
    if match.is_decided:
        retract_winner(bracket, match)


def advance_winner(bracket: Bracket, match: Match) -> None:
    """Move the winner of ``match`` into its slot in the next round."""
    if match.winner_team_id is None:
        return
    parent, side = bracket.parent_slot(match)
    if parent is None:
        return
    place_team(bracket, parent, side, match.winner_team_id)


def set_winner(bracket: Bracket, match_id: int, winner_team_id: int) -> Bracket:
    """
    Record the winner of a match and advance it.

    Calling again with the same winner does nothing. Calling with the other
    team replaces the result and re-propagates; later results built on the
    old winner are withdrawn.

    Raises:
        UnknownMatch: no such match
        InvalidMatchState: a slot of the match is still empty
        InvalidSlotTeam: the winner is in neither slot
    """
    match = bracket.get_match(match_id)

    if not match.is_ready:
        raise InvalidMatchState(
            f"Match {match_id} needs two teams before a winner can be set"
        )
    if match.side_of(winner_team_id) is None:
        raise InvalidSlotTeam(match_id, winner_team_id)

    if match.winner_team_id == winner_team_id:
        return bracket

    reopened = _withdraw(bracket, match)
    match.winner_team_id = winner_team_id
    match.status = MatchStatus.COMPLETED
    _settle(bracket, reopened)
    advance_winner(bracket, match)
    return bracket


def clear_winner(bracket: Bracket, match_id: int) -> Bracket:
    """Withdraw a recorded result so the match can be edited again."""
    match = bracket.get_match(match_id)
    if match.is_bye:
        raise InvalidMatchState(f"Match {match_id} is a bye and has no result to clear")
    retract_winner(bracket, match)
    return bracket


def record_score(
    bracket: Bracket,
    match_id: int,
    home_score: Optional[float],
    away_score: Optional[float],
) -> Bracket:
    """Store display scores. Scores never decide the winner."""
    match = bracket.get_match(match_id)
    if match.is_bye:
        raise InvalidMatchState(f"Match {match_id} is a bye and cannot carry a score")
    match.home_score = home_score
    match.away_score = away_score
    return bracket
