"""
Tests for the Tournament Bracket controller

Tests signal emission, error behaviour and the display data handed to
views and exporters.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from engine.bracket import MatchStatus
from engine.errors import InsufficientTeams, InvalidMatchState, LockedMatchMutation
from engine.layout import LayoutDimensions
from engine.tournament_bracket import TournamentBracket


def seeded(count: int) -> list[dict]:
    return [{"id": i, "name": f"Team {i}", "seed": i} for i in range(1, count + 1)]


class TestTournamentBracketSetup:
    """Tests for generating and loading brackets."""

    def test_no_bracket_initially(self):
        controller = TournamentBracket(competition_id=1)
        assert not controller.has_bracket
        assert controller.get_upcoming_matches() == []
        assert controller.unplaced_teams() == []

    def test_operations_need_a_bracket(self):
        controller = TournamentBracket(competition_id=1)
        with pytest.raises(InvalidMatchState):
            controller.set_winner(1, 1)

    def test_generate(self):
        controller = TournamentBracket(competition_id=4)
        bracket = controller.generate(seeded(8))

        assert controller.bracket is bracket
        assert bracket.competition_id == 4
        assert bracket.total_rounds == 3

    def test_generate_rejects_small_field(self):
        controller = TournamentBracket(competition_id=1)
        with pytest.raises(InsufficientTeams):
            controller.generate(seeded(2))
        assert not controller.has_bracket

    def test_state_round_trip(self):
        controller = TournamentBracket(competition_id=2)
        controller.generate(seeded(6))
        controller.set_winner(2, 4, home_score=3, away_score=1)

        restored = TournamentBracket.from_state(controller.export_state())

        assert restored.competition_id == 2
        assert restored.export_state() == controller.export_state()


class TestTournamentBracketSignals:
    """Tests for signal emissions."""

    def setup_method(self):
        """Set up a controller with signal mocks."""
        self.controller = TournamentBracket(competition_id=1)

        self.generated_mock = MagicMock()
        self.assigned_mock = MagicMock()
        self.completed_mock = MagicMock()
        self.tournament_mock = MagicMock()
        self.updated_mock = MagicMock()

        self.controller.bracket_generated.connect(self.generated_mock)
        self.controller.team_assigned.connect(self.assigned_mock)
        self.controller.match_completed.connect(self.completed_mock)
        self.controller.tournament_completed.connect(self.tournament_mock)
        self.controller.bracket_updated.connect(self.updated_mock)

        self.controller.generate(seeded(4))

    def test_generate_emits(self):
        assert self.generated_mock.call_count == 1
        payload = self.generated_mock.call_args[0][0]
        assert payload == {"competition_id": 1, "total_rounds": 2, "total_matches": 3}
        assert self.updated_mock.call_count == 1

    def test_assign_emits(self):
        self.controller.assign_team(1, "home", 2)

        payload = self.assigned_mock.call_args[0][0]
        assert payload == {"match_id": 1, "side": "home", "team_id": 2}
        assert self.updated_mock.call_count == 2

    def test_set_winner_emits_match_completed(self):
        self.controller.set_winner(1, 4, home_score=1, away_score=2)

        payload = self.completed_mock.call_args[0][0]
        assert payload["id"] == 1
        assert payload["winner_team_id"] == 4
        assert payload["winner_team_name"] == "Team 4"
        assert payload["away_score"] == 2
        assert payload["status"] == MatchStatus.COMPLETED.value

    def test_tournament_completed_once(self):
        self.controller.set_winner(1, 1)
        self.controller.set_winner(2, 2)
        assert not self.tournament_mock.called

        self.controller.set_winner(3, 2)
        self.controller.set_winner(3, 2)

        assert self.tournament_mock.call_count == 1
        payload = self.tournament_mock.call_args[0][0]
        assert payload["winner_team_id"] == 2
        assert payload["winner_team_name"] == "Team 2"
        assert payload["runner_up_team_id"] == 1

    def test_repeated_winner_emits_nothing(self):
        """Recording the same winner again does not trigger a save."""
        self.controller.set_winner(1, 1)
        self.completed_mock.reset_mock()
        self.updated_mock.reset_mock()

        self.controller.set_winner(1, 1)

        assert not self.completed_mock.called
        assert not self.updated_mock.called

    def test_repeated_winner_with_scores_updates(self):
        self.controller.set_winner(1, 1)
        self.completed_mock.reset_mock()
        self.updated_mock.reset_mock()

        self.controller.set_winner(1, 1, home_score=3, away_score=1)

        assert not self.completed_mock.called
        assert self.updated_mock.call_count == 1
        assert self.controller.bracket.get_match(1).home_score == 3

    def test_failed_operation_emits_nothing(self):
        self.controller.set_winner(1, 1)
        self.updated_mock.reset_mock()

        with pytest.raises(LockedMatchMutation):
            self.controller.assign_team(1, "away", 3)

        assert not self.updated_mock.called
        assert not self.assigned_mock.called

    def test_schedule_and_link_emit_update(self):
        self.controller.schedule_match(1, datetime(2026, 6, 1, 15))
        self.controller.link_game(2, 10)
        assert self.updated_mock.call_count == 3


class TestTournamentBracketQueries:
    """Tests for display data."""

    @pytest.fixture
    def controller(self):
        controller = TournamentBracket(competition_id=1)
        controller.generate(seeded(5))
        return controller

    def test_bracket_display(self, controller):
        display = controller.get_bracket_display()

        assert display["competition_id"] == 1
        assert display["current_round"] == 1
        assert [r["round_name"] for r in display["rounds"]] == [
            "Quarter Finals", "Semi Finals", "Final"
        ]
        first = display["rounds"][0]["matches"][0]
        assert first["home_team_name"] == "Team 1"
        assert first["away_team_name"] is None
        assert first["is_bye"] is True

    def test_upcoming_matches(self, controller):
        upcoming = controller.get_upcoming_matches()
        # 4 v 5 and 2 v 3 (both byes already advanced)
        assert sorted(m.id for m in upcoming) == [2, 6]

    def test_unplaced_teams_after_removal(self, controller):
        assert controller.unplaced_teams() == []

        controller.clear_slot(2, "away")

        assert [t.team_id for t in controller.unplaced_teams()] == [5]

    def test_compute_layout(self, controller):
        result = controller.compute_layout(LayoutDimensions(100, 40, 20, 10))
        assert len(result.nodes) == 7
        assert result.node_for(1).width == 100

    def test_clear_winner(self, controller):
        controller.set_winner(2, 5)
        controller.clear_winner(2)
        assert controller.bracket.get_match(5).away_team_id is None
