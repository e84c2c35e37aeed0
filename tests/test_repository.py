"""
Tests for bracket persistence.

Runs against an in-memory SQLite database.
"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from engine import generate_bracket, set_winner
from models import Base, Competition, competition_teams
from models import Team as TeamModel
from services.bracket_repository import (
    BracketNotFound,
    BracketRepository,
    CompetitionNotFound,
    StaleBracketError,
)


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def competition_id(session):
    competition = Competition(name="Club Cup")
    session.add(competition)
    for i in range(1, 6):
        session.add(TeamModel(id=i, name=f"Team {i}", abbreviation=f"T{i}"))
    session.flush()

    repo = BracketRepository(session)
    for i in range(1, 6):
        repo.register_team(competition.id, i, seed=i)
    return competition.id


@pytest.fixture
def repo(session):
    return BracketRepository(session)


class TestTeamRegistry:
    """Tests for registered teams."""

    def test_list_in_seed_order(self, repo, competition_id):
        teams = repo.list_registered_teams(competition_id)
        assert [t.team_id for t in teams] == [1, 2, 3, 4, 5]
        assert teams[0].team_name == "Team 1"
        assert teams[0].seed == 1

    def test_unseeded_last(self, repo, competition_id):
        repo.register_team(competition_id, 1, seed=None)
        teams = repo.list_registered_teams(competition_id)
        assert [t.team_id for t in teams] == [2, 3, 4, 5, 1]

    def test_register_updates_seed(self, repo, competition_id):
        repo.register_team(competition_id, 5, seed=0)
        teams = repo.list_registered_teams(competition_id)
        assert teams[0].team_id == 5
        assert len(teams) == 5

    def test_unknown_competition(self, repo):
        with pytest.raises(CompetitionNotFound):
            repo.list_registered_teams(99)

    def test_unknown_team(self, repo, competition_id):
        with pytest.raises(LookupError):
            repo.register_team(competition_id, 99)


class TestBracketPersistence:
    """Tests for saving and loading brackets."""

    @pytest.fixture
    def bracket(self, repo, competition_id):
        return generate_bracket(repo.list_registered_teams(competition_id), competition_id)

    def test_load_missing_bracket(self, repo, competition_id):
        with pytest.raises(BracketNotFound):
            repo.load_bracket(competition_id)

    def test_round_trip(self, repo, competition_id, bracket):
        set_winner(bracket, 2, 5)
        bracket.get_match(6).scheduled_at = datetime(2026, 7, 4, 14, 0)

        repo.save_bracket(competition_id, bracket)
        loaded, _ = repo.load_bracket(competition_id)

        assert loaded.to_dict() == bracket.to_dict()

    def test_version_increments(self, repo, competition_id, bracket):
        assert repo.bracket_version(competition_id) == 0

        version = repo.save_bracket(competition_id, bracket, expected_version=0)
        assert version == 1

        _, loaded_version = repo.load_bracket(competition_id)
        assert loaded_version == 1

        assert repo.save_bracket(competition_id, bracket, expected_version=1) == 2

    def test_stale_save_rejected(self, repo, competition_id, bracket):
        repo.save_bracket(competition_id, bracket, expected_version=0)

        set_winner(bracket, 2, 4)
        with pytest.raises(StaleBracketError) as exc_info:
            repo.save_bracket(competition_id, bracket, expected_version=0)

        assert exc_info.value.expected == 0
        assert exc_info.value.actual == 1
        loaded, _ = repo.load_bracket(competition_id)
        assert loaded.get_match(2).winner_team_id is None

    def test_results_stored(self, session, repo, competition_id, bracket):
        set_winner(bracket, 2, 4)   # 4 beats 5
        set_winner(bracket, 5, 1)   # 1 beats 4
        set_winner(bracket, 6, 3)   # 3 beats 2
        set_winner(bracket, 7, 1)

        repo.save_bracket(competition_id, bracket)

        rows = session.execute(
            select(competition_teams.c.team_id, competition_teams.c.is_eliminated,
                   competition_teams.c.elimination_round)
            .where(competition_teams.c.competition_id == competition_id)
        ).all()
        flags = {r.team_id: (bool(r.is_eliminated), r.elimination_round) for r in rows}
        assert flags == {
            1: (False, None),
            2: (True, 2),
            3: (True, 3),
            4: (True, 2),
            5: (True, 1),
        }

        competition = session.get(Competition, competition_id)
        assert competition.winner_team_id == 1
        assert competition.completed_at is not None

    def test_withdrawn_result_clears_champion(self, session, repo, competition_id, bracket):
        set_winner(bracket, 2, 4)
        set_winner(bracket, 5, 1)
        set_winner(bracket, 6, 3)
        set_winner(bracket, 7, 1)
        repo.save_bracket(competition_id, bracket)

        set_winner(bracket, 7, 3)
        set_winner(bracket, 6, 2)
        repo.save_bracket(competition_id, bracket)

        competition = session.get(Competition, competition_id)
        assert competition.winner_team_id is None
        assert competition.completed_at is None

    def test_delete_bracket(self, repo, competition_id, bracket):
        repo.save_bracket(competition_id, bracket)
        repo.delete_bracket(competition_id)
        with pytest.raises(BracketNotFound):
            repo.load_bracket(competition_id)
