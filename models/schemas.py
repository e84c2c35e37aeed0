"""
Pydantic schemas for data validation at the application boundary.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============ Team Schemas ============

class TeamEntry(BaseModel):
    """A team registered into a competition."""
    team_id: int = Field(..., ge=1)
    team_name: str = Field(..., min_length=1, max_length=200)
    seed: Optional[int] = Field(None, ge=1)

    @field_validator("team_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Team name cannot be empty")
        return v.strip()


class TeamCreate(BaseModel):
    """Schema for creating a new team."""
    name: str = Field(..., min_length=1, max_length=200)
    abbreviation: str = Field("", max_length=5)
    primary_color: str = Field(default="#2196F3", pattern=r"^#[0-9A-Fa-f]{6}$")
    secondary_color: str = Field(default="#FFFFFF", pattern=r"^#[0-9A-Fa-f]{6}$")


# ============ Bracket Requests ============

class GenerateBracketRequest(BaseModel):
    """Teams snapshot for a new draw."""
    teams: list[TeamEntry] = Field(..., min_length=4)

    @field_validator("teams")
    @classmethod
    def unique_team_ids(cls, v: list[TeamEntry]) -> list[TeamEntry]:
        ids = [t.team_id for t in v]
        if len(set(ids)) != len(ids):
            raise ValueError("Each team can only be entered once")
        return v


class AssignTeamRequest(BaseModel):
    """Place a team into a slot, or clear it with team_id = None."""
    match_id: int = Field(..., ge=1)
    side: Literal["home", "away"]
    team_id: Optional[int] = Field(None, ge=1)


class SetWinnerRequest(BaseModel):
    """Record a match result."""
    match_id: int = Field(..., ge=1)
    winner_team_id: int = Field(..., ge=1)
    home_score: Optional[float] = Field(None, ge=0)
    away_score: Optional[float] = Field(None, ge=0)


class ScheduleMatchRequest(BaseModel):
    match_id: int = Field(..., ge=1)
    scheduled_at: Optional[datetime] = None


class LayoutRequest(BaseModel):
    """Geometry parameters for the bracket layout."""
    match_width: float = Field(220, gt=0)
    match_height: float = Field(84, gt=0)
    round_gap_x: float = Field(70, ge=0)
    match_gap_y: float = Field(22, ge=0)


# ============ Bracket Responses ============

class BracketMatchResponse(BaseModel):
    """Schema for one bracket match."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    round_number: int
    match_number: int
    home_team_id: Optional[int]
    away_team_id: Optional[int]
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_score: Optional[float]
    away_score: Optional[float]
    winner_team_id: Optional[int]
    status: str
    game_id: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    is_bye: bool = False

    @model_validator(mode="after")
    def winner_in_match(self) -> "BracketMatchResponse":
        if self.winner_team_id is not None and self.winner_team_id not in (
            self.home_team_id, self.away_team_id
        ):
            raise ValueError("Winner must be one of the teams in the match")
        return self


class RoundResponse(BaseModel):
    round_number: int
    round_name: str
    matches: list[BracketMatchResponse]


class BracketResponse(BaseModel):
    """Full bracket as sent to views and API clients."""
    competition_id: Optional[int]
    current_round: Optional[int] = None
    champion_team_id: Optional[int] = None
    rounds: list[RoundResponse]


class LayoutNodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    match_id: int
    round_number: int
    match_number: int
    x: float
    y: float
    width: float
    height: float


class ConnectorResponse(BaseModel):
    from_match_id: int
    to_match_id: int
    side: Literal["home", "away"]
    points: list[tuple[float, float]]
    path: str


class LayoutResponse(BaseModel):
    width: float
    height: float
    nodes: list[LayoutNodeResponse]
    connectors: list[ConnectorResponse]

    @classmethod
    def from_layout(cls, layout) -> "LayoutResponse":
        return cls(
            width=layout.width,
            height=layout.height,
            nodes=[LayoutNodeResponse.model_validate(n) for n in layout.nodes],
            connectors=[
                ConnectorResponse(
                    from_match_id=c.from_match_id,
                    to_match_id=c.to_match_id,
                    side=c.side.value,
                    points=list(c.points),
                    path=c.svg_path(),
                )
                for c in layout.connectors
            ],
        )
