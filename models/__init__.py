"""
KnockoutDesk Database Models

SQLAlchemy ORM models for competitions, teams and knockout brackets.
"""

from models.base import Base, engine, SessionLocal, get_session, init_db
from models.team import Team
from models.competition import Competition, CompetitionType, competition_teams
from models.bracket_match import TournamentBracketMatch

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_session",
    "init_db",
    "Team",
    "Competition",
    "CompetitionType",
    "competition_teams",
    "TournamentBracketMatch",
]
