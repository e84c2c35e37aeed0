"""
Tests for boundary schemas and drawing helpers.
"""

import pytest
from pydantic import ValidationError

from engine import compute_layout, generate_bracket
from engine.bracket import Side
from gui.bracket_painter import slot_label
from gui.widgets.tournament_bracket import slot_at
from models.schemas import (
    AssignTeamRequest,
    BracketMatchResponse,
    GenerateBracketRequest,
    LayoutResponse,
)


def seeded(count: int) -> list[dict]:
    return [{"team_id": i, "team_name": f"Team {i}", "seed": i} for i in range(1, count + 1)]


class TestRequestSchemas:
    """Tests for request validation."""

    def test_generate_request(self):
        request = GenerateBracketRequest(teams=seeded(4))
        assert len(request.teams) == 4

    def test_generate_request_needs_four_teams(self):
        with pytest.raises(ValidationError):
            GenerateBracketRequest(teams=seeded(3))

    def test_generate_request_rejects_duplicates(self):
        teams = seeded(4) + [{"team_id": 1, "team_name": "Again"}]
        with pytest.raises(ValidationError):
            GenerateBracketRequest(teams=teams)

    def test_blank_team_name(self):
        teams = seeded(3) + [{"team_id": 9, "team_name": "   "}]
        with pytest.raises(ValidationError):
            GenerateBracketRequest(teams=teams)

    def test_assign_request_side(self):
        assert AssignTeamRequest(match_id=1, side="away", team_id=None).team_id is None
        with pytest.raises(ValidationError):
            AssignTeamRequest(match_id=1, side="left", team_id=2)

    def test_request_feeds_engine(self):
        request = GenerateBracketRequest(teams=seeded(4))
        bracket = generate_bracket(t.model_dump() for t in request.teams)
        assert bracket.rounds[0].matches[0].away_team_id == 4


class TestResponseSchemas:
    """Tests for response models built from engine objects."""

    def test_match_response_from_engine_match(self):
        bracket = generate_bracket(seeded(5))
        data = bracket.get_match(1).to_dict()

        response = BracketMatchResponse(**data, is_bye=True)

        assert response.winner_team_id == 1
        assert response.status == "completed"

    def test_match_response_rejects_foreign_winner(self):
        data = generate_bracket(seeded(4)).get_match(1).to_dict()
        data["winner_team_id"] = 2
        with pytest.raises(ValidationError):
            BracketMatchResponse(**data)

    def test_layout_response(self):
        result = compute_layout(generate_bracket(seeded(4)))
        response = LayoutResponse.from_layout(result)

        assert response.width == result.width
        assert len(response.nodes) == 3
        assert response.connectors[0].side in ("home", "away")
        assert response.connectors[0].path.startswith("M ")


class TestDrawingHelpers:
    """Tests for slot labels and hit testing."""

    def test_slot_labels(self):
        bracket = generate_bracket(seeded(5))
        bye = bracket.get_match(1)
        semi = bracket.get_match(5)

        assert slot_label(bracket, bye, Side.HOME) == "Team 1"
        assert slot_label(bracket, bye, Side.AWAY) == "BYE"
        assert slot_label(bracket, semi, Side.AWAY) == "TBD"

    def test_long_names_elided(self):
        teams = seeded(4)
        teams[0]["team_name"] = "A" * 40
        bracket = generate_bracket(teams)
        label = slot_label(bracket, bracket.get_match(1), Side.HOME, max_chars=10)
        assert len(label) == 10
        assert label.endswith("…")

    def test_slot_at(self):
        result = compute_layout(generate_bracket(seeded(4)))

        assert slot_at(result, 10, 10) == (1, Side.HOME)
        assert slot_at(result, 10, 80) == (1, Side.AWAY)
        assert slot_at(result, 10, 120) == (2, Side.HOME)
        assert slot_at(result, 250, 10) is None
