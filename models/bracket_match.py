"""
Persisted bracket match rows.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.competition import Competition


class TournamentBracketMatch(Base):
    """
    One match of a competition's knockout bracket.

    ``match_id`` is the engine's id, unique within the competition; ``id``
    is the row key.
    """
    __tablename__ = "tournament_brackets"
    __table_args__ = (
        UniqueConstraint("competition_id", "round_number", "match_number"),
        UniqueConstraint("competition_id", "match_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    competition_id: Mapped[int] = mapped_column(
        ForeignKey("competitions.id", ondelete="CASCADE"),
        nullable=False
    )
    match_id: Mapped[int] = mapped_column(Integer, nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    round_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    match_number: Mapped[int] = mapped_column(Integer, nullable=False)

    home_team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    away_team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    winner_team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)

    # Display only
    home_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    away_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    game_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    scheduled_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")

    competition: Mapped["Competition"] = relationship(back_populates="bracket_matches")

    def __repr__(self) -> str:
        return (
            f"<TournamentBracketMatch(competition={self.competition_id}, "
            f"round={self.round_number}, match={self.match_number})>"
        )
