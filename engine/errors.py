"""
Bracket engine errors.

Every public engine operation either applies fully or raises one of these
before touching the bracket. The surrounding application turns them into
operator-facing messages.
"""

from typing import Optional


class BracketError(ValueError):
    """Base class for all bracket engine failures."""


class InsufficientTeams(BracketError):
    """Fewer teams than a knockout draw needs."""

    def __init__(self, team_count: int, minimum: int):
        self.team_count = team_count
        self.minimum = minimum
        super().__init__(
            f"Need at least {minimum} teams to generate a bracket, got {team_count}"
        )


class UnknownMatch(BracketError):
    """A match id that does not exist in the bracket."""

    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__(f"Match not found: {match_id}")


class InvalidMatchState(BracketError):
    """The match is not in a state that allows the requested operation."""


class InvalidSlotTeam(InvalidMatchState):
    """A winner in neither slot of the match, or a team the bracket does not know."""

    def __init__(self, match_id: int, team_id: int, message: Optional[str] = None):
        self.match_id = match_id
        self.team_id = team_id
        super().__init__(
            message or f"Winner must be one of the teams in match {match_id}, got team {team_id}"
        )


class LockedMatchMutation(BracketError):
    """Attempt to change a decided match without clearing its winner first."""

    def __init__(self, match_id: int, reason: str = "already has a winner"):
        self.match_id = match_id
        super().__init__(f"Match {match_id} {reason}")
