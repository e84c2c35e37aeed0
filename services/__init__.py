"""
KnockoutDesk Services

Application services for events, persistence and export.
"""

from services.event_bus import EventBus
from services.bracket_repository import (
    BracketRepository,
    BracketNotFound,
    CompetitionNotFound,
    StaleBracketError,
)
from services.export import BracketExporter

__all__ = [
    "EventBus",
    "BracketRepository",
    "BracketNotFound",
    "CompetitionNotFound",
    "StaleBracketError",
    "BracketExporter",
]
