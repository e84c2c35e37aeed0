"""
Competition model and team registrations.

A tournament competition owns one knockout bracket, stored row-per-match in
``tournament_brackets``. ``bracket_version`` increases on every save so two
operators cannot silently overwrite each other.
"""

import enum
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Column, DateTime, Enum as SAEnum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.team import Team
    from models.bracket_match import TournamentBracketMatch


class CompetitionType(enum.Enum):
    """Only tournaments have brackets."""
    TOURNAMENT = "tournament"
    LEAGUE = "league"


# Association table for registered teams
competition_teams = Table(
    "competition_teams",
    Base.metadata,
    Column("competition_id", Integer, ForeignKey("competitions.id", ondelete="CASCADE"), primary_key=True),
    Column("team_id", Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("seed", Integer, nullable=True),
    Column("is_eliminated", Boolean, nullable=False, default=False),
    Column("elimination_round", Integer, nullable=True),
)


class Competition(Base):
    """A club competition (tournament or league)."""
    __tablename__ = "competitions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    competition_type: Mapped[CompetitionType] = mapped_column(
        SAEnum(CompetitionType),
        default=CompetitionType.TOURNAMENT
    )

    # Optimistic concurrency counter for the bracket
    bracket_version: Mapped[int] = mapped_column(Integer, default=0)

    # Winner
    winner_team_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("teams.id"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc)
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    teams: Mapped[list["Team"]] = relationship(secondary=competition_teams)
    bracket_matches: Mapped[list["TournamentBracketMatch"]] = relationship(
        back_populates="competition",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Competition(id={self.id}, name='{self.name}', type={self.competition_type.value})>"

    @property
    def is_tournament(self) -> bool:
        return self.competition_type == CompetitionType.TOURNAMENT
