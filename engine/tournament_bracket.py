"""
Tournament Bracket Controller

Holds the live bracket of one competition and announces every change
through Qt signals, so views and the persistence layer can react.

Usage:
    controller = TournamentBracket(competition_id=7)
    controller.generate(teams)
    controller.assign_team(match_id=3, side="home", team_id=12)
    controller.set_winner(match_id=3, winner_team_id=12)
"""

from datetime import datetime
from typing import Iterable, Optional, Union

from PySide6.QtCore import QObject, Signal

from engine import assignment, draw, propagation
from engine.bracket import Bracket, Match, Side, Team
from engine.errors import InvalidMatchState
from engine.layout import BracketLayout, LayoutDimensions, layout


class TournamentBracket(QObject):
    """
    Owns one Bracket and applies operator actions to it.

    Failed operations raise before anything changes and emit nothing.
    """

    # Signals
    bracket_generated = Signal(dict)     # {competition_id, total_rounds, total_matches}
    team_assigned = Signal(dict)         # {match_id, side, team_id}
    match_completed = Signal(dict)       # match details
    tournament_completed = Signal(dict)  # {winner_team_id, winner_team_name, runner_up_team_id}
    bracket_updated = Signal()           # bracket structure changed

    def __init__(self, competition_id: Optional[int] = None, bracket: Optional[Bracket] = None):
        super().__init__()
        self.competition_id = competition_id
        self._bracket = bracket

    @property
    def bracket(self) -> Optional[Bracket]:
        return self._bracket

    @property
    def has_bracket(self) -> bool:
        return self._bracket is not None

    def _require_bracket(self) -> Bracket:
        if self._bracket is None:
            raise InvalidMatchState("No bracket has been generated for this competition")
        return self._bracket

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def generate(self, teams: Iterable[Union[Team, dict]]) -> Bracket:
        """Replace the current bracket with a fresh draw."""
        self._bracket = draw.build(teams, competition_id=self.competition_id)

        self.bracket_generated.emit({
            "competition_id": self.competition_id,
            "total_rounds": self._bracket.total_rounds,
            "total_matches": sum(len(r.matches) for r in self._bracket.rounds),
        })
        self.bracket_updated.emit()
        return self._bracket

    def load(self, bracket: Bracket) -> None:
        """Adopt a bracket restored from storage."""
        self._bracket = bracket
        self.competition_id = bracket.competition_id
        self.bracket_updated.emit()

    def assign_team(self, match_id: int, side: Union[Side, str], team_id: Optional[int]) -> None:
        bracket = self._require_bracket()
        champion_before = bracket.champion()

        assignment.assign(bracket, match_id, side, team_id)

        self.team_assigned.emit({
            "match_id": match_id,
            "side": Side(side).value,
            "team_id": team_id,
        })
        self._check_champion(champion_before)
        self.bracket_updated.emit()

    def clear_slot(self, match_id: int, side: Union[Side, str]) -> None:
        self.assign_team(match_id, side, None)

    def set_winner(
        self,
        match_id: int,
        winner_team_id: int,
        home_score: Optional[float] = None,
        away_score: Optional[float] = None,
    ) -> None:
        """
        Record a result. The winner advances to the next round automatically.

        Scores are optional and for display only.
        """
        bracket = self._require_bracket()
        champion_before = bracket.champion()
        match = bracket.get_match(match_id)
        unchanged = match.winner_team_id == winner_team_id

        propagation.set_winner(bracket, match_id, winner_team_id)
        scored = home_score is not None or away_score is not None
        if scored:
            propagation.record_score(bracket, match_id, home_score, away_score)

        if unchanged:
            # Same winner again: only new scores need saving
            if scored:
                self.bracket_updated.emit()
            return

        self.match_completed.emit(self._match_to_dict(match))
        self._check_champion(champion_before)
        self.bracket_updated.emit()

    def clear_winner(self, match_id: int) -> None:
        bracket = self._require_bracket()
        champion_before = bracket.champion()
        propagation.clear_winner(bracket, match_id)
        self._check_champion(champion_before)
        self.bracket_updated.emit()

    def record_score(self, match_id: int, home_score: Optional[float], away_score: Optional[float]) -> None:
        propagation.record_score(self._require_bracket(), match_id, home_score, away_score)
        self.bracket_updated.emit()

    def schedule_match(self, match_id: int, scheduled_at: Optional[datetime]) -> None:
        assignment.schedule_match(self._require_bracket(), match_id, scheduled_at)
        self.bracket_updated.emit()

    def link_game(self, match_id: int, game_id: Optional[int]) -> None:
        assignment.link_game(self._require_bracket(), match_id, game_id)
        self.bracket_updated.emit()

    def _check_champion(self, champion_before: Optional[int]) -> None:
        """Announce a newly decided final."""
        champion = self._bracket.champion()
        if champion is not None and champion != champion_before:
            self.tournament_completed.emit({
                "competition_id": self.competition_id,
                "winner_team_id": champion,
                "winner_team_name": self._bracket.team_name(champion),
                "runner_up_team_id": self._bracket.runner_up(),
            })

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def compute_layout(self, dims: Optional[LayoutDimensions] = None) -> BracketLayout:
        dims = dims or LayoutDimensions()
        return layout(
            self._require_bracket(),
            dims.match_width,
            dims.match_height,
            dims.round_gap_x,
            dims.match_gap_y,
        )

    def get_upcoming_matches(self) -> list[Match]:
        """Matches with both teams known and no result yet."""
        if self._bracket is None:
            return []
        return [m for m in self._bracket.matches() if m.is_ready and not m.is_decided]

    def unplaced_teams(self) -> list[Team]:
        """Registered teams not sitting in any slot of round 1 or an undecided match."""
        if self._bracket is None:
            return []
        placed = set()
        for match in self._bracket.matches():
            if match.round_number == 1 or not match.is_decided:
                placed.update(t for t in (match.home_team_id, match.away_team_id) if t is not None)
        return [t for t in draw.rank_teams(self._bracket.teams.values()) if t.team_id not in placed]

    def get_bracket_display(self) -> dict:
        """Bracket data with team names resolved, for the views and exporters."""
        bracket = self._require_bracket()
        return {
            "competition_id": self.competition_id,
            "current_round": bracket.current_round(),
            "champion_team_id": bracket.champion(),
            "rounds": [
                {
                    "round_number": rnd.round_number,
                    "round_name": rnd.name,
                    "matches": [self._match_to_dict(m) for m in rnd.matches],
                }
                for rnd in bracket.rounds
            ],
        }

    def _match_to_dict(self, match: Match) -> dict:
        data = match.to_dict()
        data["home_team_name"] = self._bracket.team_name(match.home_team_id)
        data["away_team_name"] = self._bracket.team_name(match.away_team_id)
        data["winner_team_name"] = self._bracket.team_name(match.winner_team_id)
        data["is_bye"] = match.is_bye
        return data

    def export_state(self) -> dict:
        """Full bracket state, loadable with ``from_state``."""
        return self._require_bracket().to_dict()

    @classmethod
    def from_state(cls, state: dict) -> "TournamentBracket":
        bracket = Bracket.from_dict(state)
        return cls(competition_id=bracket.competition_id, bracket=bracket)
