"""
Team model for club competitions.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Team(Base):
    """A club team that can be registered into competitions."""
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    abbreviation: Mapped[str] = mapped_column(String(5), nullable=False, default="")

    # Team colors for display
    primary_color: Mapped[str] = mapped_column(String(7), default="#2196F3")  # Hex color
    secondary_color: Mapped[str] = mapped_column(String(7), default="#FFFFFF")

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}', abbr='{self.abbreviation}')>"
