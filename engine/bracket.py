"""
Bracket Model

Data structures for a single-elimination bracket: teams, matches, rounds.

Matches are kept in a flat arena keyed by match id. Parent/child links are
never stored; they are recomputed from (round_number, match_number):

    parent_match_number = ceil(match_number / 2)
    odd match_number  -> parent's home slot
    even match_number -> parent's away slot
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional

from engine.errors import InvalidMatchState, UnknownMatch


class Side(enum.Enum):
    """One of the two team positions of a match."""
    HOME = "home"
    AWAY = "away"


class MatchStatus(enum.Enum):
    """Match lifecycle states."""
    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Team:
    """A registered team, as captured when the draw is made."""
    team_id: int
    team_name: str
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Team":
        """Accept both registry rows ({team_id, team_name}) and short dicts ({id, name})."""
        team_id = data["team_id"] if "team_id" in data else data["id"]
        team_name = data.get("team_name", data.get("name", ""))
        return cls(team_id=int(team_id), team_name=team_name or "", seed=data.get("seed"))

    def to_dict(self) -> dict:
        return {"team_id": self.team_id, "team_name": self.team_name, "seed": self.seed}


@dataclass
class Match:
    """One bracket node with a home slot, an away slot and an optional winner."""
    id: int
    round_number: int
    match_number: int
    home_team_id: Optional[int] = None
    away_team_id: Optional[int] = None
    home_score: Optional[float] = None
    away_score: Optional[float] = None
    winner_team_id: Optional[int] = None
    status: MatchStatus = MatchStatus.PENDING
    game_id: Optional[int] = None
    scheduled_at: Optional[datetime] = None

    @property
    def is_decided(self) -> bool:
        return self.winner_team_id is not None

    @property
    def is_bye(self) -> bool:
        """A first-round match decided with only one team present."""
        return (
            self.round_number == 1
            and self.is_decided
            and (self.home_team_id is None) != (self.away_team_id is None)
        )

    @property
    def is_ready(self) -> bool:
        """Both slots filled, so a winner can be recorded."""
        return self.home_team_id is not None and self.away_team_id is not None

    @property
    def loser_team_id(self) -> Optional[int]:
        if not self.is_decided or not self.is_ready:
            return None
        if self.winner_team_id == self.home_team_id:
            return self.away_team_id
        return self.home_team_id

    def team_in(self, side: Side) -> Optional[int]:
        return self.home_team_id if side is Side.HOME else self.away_team_id

    def set_team(self, side: Side, team_id: Optional[int]) -> None:
        if side is Side.HOME:
            self.home_team_id = team_id
        else:
            self.away_team_id = team_id

    def side_of(self, team_id: int) -> Optional[Side]:
        if self.home_team_id == team_id:
            return Side.HOME
        if self.away_team_id == team_id:
            return Side.AWAY
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "round_number": self.round_number,
            "match_number": self.match_number,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "winner_team_id": self.winner_team_id,
            "status": self.status.value,
            "game_id": self.game_id,
            "scheduled_at": self.scheduled_at.isoformat() if self.scheduled_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Match":
        scheduled_at = data.get("scheduled_at")
        if isinstance(scheduled_at, str):
            scheduled_at = datetime.fromisoformat(scheduled_at)
        return cls(
            id=int(data["id"]),
            round_number=int(data["round_number"]),
            match_number=int(data["match_number"]),
            home_team_id=data.get("home_team_id"),
            away_team_id=data.get("away_team_id"),
            home_score=data.get("home_score"),
            away_score=data.get("away_score"),
            winner_team_id=data.get("winner_team_id"),
            status=MatchStatus(data.get("status", MatchStatus.PENDING.value)),
            game_id=data.get("game_id"),
            scheduled_at=scheduled_at,
        )


@dataclass
class Round:
    """Matches sharing a round number, ordered by match_number."""
    round_number: int
    name: str
    matches: list[Match] = field(default_factory=list)


def parent_position(match_number: int) -> tuple[int, Side]:
    """Parent match number in the next round and the slot this match feeds."""
    parent_number = (match_number + 1) // 2
    side = Side.HOME if match_number % 2 == 1 else Side.AWAY
    return parent_number, side


def round_name(round_number: int, total_rounds: int, match_count: int) -> str:
    """Display name for a round, counted back from the final."""
    rounds_from_final = total_rounds - round_number
    if rounds_from_final == 0:
        return "Final"
    if rounds_from_final == 1:
        return "Semi Finals"
    if rounds_from_final == 2:
        return "Quarter Finals"
    return f"Round of {match_count * 2}"


@dataclass
class Bracket:
    """
    The single-elimination tree for one competition.

    Invariants:
    1. Round numbers are contiguous from 1.
    2. Every non-final match has exactly one parent in the next round.
    3. A team sits in at most one unresolved slot (a slot of an undecided match).
    4. A winner is one of the match's teams, and both teams are present,
       except for first-round byes.
    """
    rounds: list[Round] = field(default_factory=list)
    teams: dict[int, Team] = field(default_factory=dict)
    competition_id: Optional[int] = None

    _index: dict[int, Match] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the match-id arena after rounds were replaced."""
        self._index = {m.id: m for m in self.matches()}

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def matches(self) -> Iterator[Match]:
        for rnd in self.rounds:
            yield from rnd.matches

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    @property
    def final(self) -> Optional[Match]:
        if not self.rounds or not self.rounds[-1].matches:
            return None
        return self.rounds[-1].matches[0]

    def get_match(self, match_id: int) -> Match:
        try:
            return self._index[match_id]
        except KeyError:
            raise UnknownMatch(match_id) from None

    def find_match(self, round_number: int, match_number: int) -> Optional[Match]:
        if round_number < 1 or round_number > len(self.rounds):
            return None
        for match in self.rounds[round_number - 1].matches:
            if match.match_number == match_number:
                return match
        return None

    def is_final(self, match: Match) -> bool:
        return match.round_number == self.total_rounds

    def parent_slot(self, match: Match) -> tuple[Optional[Match], Optional[Side]]:
        """The match and slot the winner of ``match`` advances into."""
        if self.is_final(match):
            return None, None
        parent_number, side = parent_position(match.match_number)
        parent = self.find_match(match.round_number + 1, parent_number)
        if parent is None:
            return None, None
        return parent, side

    def children_of(self, match: Match) -> list[Match]:
        """Matches of the previous round feeding into ``match``, home feeder first."""
        if match.round_number == 1:
            return []
        children = []
        for number in (match.match_number * 2 - 1, match.match_number * 2):
            child = self.find_match(match.round_number - 1, number)
            if child is not None:
                children.append(child)
        return children

    def unresolved_slots_of(self, team_id: int) -> list[tuple[Match, Side]]:
        """Slots holding ``team_id`` in matches that have no winner yet."""
        slots = []
        for match in self.matches():
            if match.is_decided:
                continue
            side = match.side_of(team_id)
            if side is not None:
                slots.append((match, side))
        return slots

    def team_name(self, team_id: Optional[int]) -> Optional[str]:
        if team_id is None:
            return None
        team = self.teams.get(team_id)
        return team.team_name if team else f"Team {team_id}"

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def champion(self) -> Optional[int]:
        final = self.final
        return final.winner_team_id if final else None

    def runner_up(self) -> Optional[int]:
        final = self.final
        return final.loser_team_id if final else None

    def eliminated(self) -> dict[int, int]:
        """team_id -> round in which the team lost."""
        result = {}
        for match in self.matches():
            loser = match.loser_team_id
            if loser is not None:
                result[loser] = match.round_number
        return result

    def current_round(self) -> Optional[int]:
        """Earliest round that still has an undecided match."""
        for rnd in self.rounds:
            if any(not m.is_decided for m in rnd.matches):
                return rnd.round_number
        return None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "competition_id": self.competition_id,
            "teams": [t.to_dict() for t in self.teams.values()],
            "rounds": [
                {
                    "round_number": rnd.round_number,
                    "round_name": rnd.name,
                    "matches": [m.to_dict() for m in rnd.matches],
                }
                for rnd in self.rounds
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Bracket":
        """Rebuild a bracket from ``to_dict`` output, checking its structure."""
        teams = {}
        for team_data in data.get("teams", []):
            team = Team.from_dict(team_data)
            teams[team.team_id] = team

        raw_rounds = sorted(data.get("rounds", []), key=lambda r: r["round_number"])
        total = len(raw_rounds)
        rounds = []
        for rnd in raw_rounds:
            matches = sorted(
                (Match.from_dict(m) for m in rnd.get("matches", [])),
                key=lambda m: m.match_number,
            )
            name = rnd.get("round_name") or round_name(rnd["round_number"], total, len(matches))
            rounds.append(Round(round_number=rnd["round_number"], name=name, matches=matches))

        bracket = cls(rounds=rounds, teams=teams, competition_id=data.get("competition_id"))
        bracket.validate()
        return bracket

    def validate(self) -> None:
        """Raise InvalidMatchState when the structure breaks an invariant."""
        seen_ids = set()
        for expected, rnd in enumerate(self.rounds, start=1):
            if rnd.round_number != expected:
                raise InvalidMatchState(
                    f"Round numbers must be contiguous from 1, found {rnd.round_number}"
                )
            if not rnd.matches:
                raise InvalidMatchState(f"Round {rnd.round_number} has no matches")
            numbers = [m.match_number for m in rnd.matches]
            if len(set(numbers)) != len(numbers):
                raise InvalidMatchState(f"Duplicate match number in round {rnd.round_number}")
            for match in rnd.matches:
                if match.round_number != rnd.round_number:
                    raise InvalidMatchState(f"Match {match.id} filed under the wrong round")
                if match.id in seen_ids:
                    raise InvalidMatchState(f"Duplicate match id {match.id}")
                seen_ids.add(match.id)
                self._validate_winner(match)
                if not self.is_final(match) and self.parent_slot(match)[0] is None:
                    raise InvalidMatchState(f"Match {match.id} has no parent match")

        if self.rounds and len(self.rounds[-1].matches) != 1:
            raise InvalidMatchState("The last round must hold exactly one match")

    @staticmethod
    def _validate_winner(match: Match) -> None:
        if match.winner_team_id is None:
            return
        if match.side_of(match.winner_team_id) is None:
            raise InvalidMatchState(
                f"Winner of match {match.id} is not one of its teams"
            )
        if not match.is_ready and not match.is_bye:
            raise InvalidMatchState(
                f"Match {match.id} has a winner but an empty slot"
            )
