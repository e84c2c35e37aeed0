"""
KnockoutDesk Configuration

Centralized settings, paths, and constants for the application.
"""

import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import appdirs


# Application info
APP_NAME = "KnockoutDesk"
APP_AUTHOR = "KnockoutDesk"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores database)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def database(self) -> Path:
        return self.data_dir / "knockoutdesk.db"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "knockoutdesk.log"

    @property
    def exports(self) -> Path:
        return self.data_dir / "exports"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.config_dir, self.log_dir, self.exports]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class DatabaseSettings:
    """Database connection settings."""
    # Overrides the SQLite file in the data directory when set
    url_env_var: str = "KNOCKOUTDESK_DATABASE_URL"
    echo: bool = False

    def url(self, paths: "Paths") -> str:
        return os.environ.get(self.url_env_var) or f"sqlite:///{paths.database}"


@dataclass(frozen=True)
class BracketLayoutSettings:
    """Bracket geometry in pixels."""
    match_width: int = 220
    match_height: int = 84
    round_gap_x: int = 70
    match_gap_y: int = 22

    # Space around the drawing when rendered
    padding: int = 24


@dataclass(frozen=True)
class ExportSettings:
    """Bracket image and document export."""
    # Device pixel ratio for PNG rasterisation
    png_scale: float = 2.0

    # reportlab page size name, oriented automatically
    pdf_page_size: str = "A4"
    pdf_margin_pt: float = 28.0

    background_color: str = "#FFFFFF"
    line_color: str = "#5A5A6E"
    card_color: str = "#F4F4F8"
    winner_color: str = "#E8B923"
    text_color: str = "#16161F"


@dataclass(frozen=True)
class UISettings:
    """UI-related settings."""
    # Minimum window size
    min_width: int = 1280
    min_height: int = 800

    # Characters shown before a team name is elided
    max_team_name_chars: int = 22


@dataclass(frozen=True)
class LogSettings:
    """Logging configuration."""
    level: str = "INFO"
    fmt: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    max_bytes: int = 1_000_000
    backup_count: int = 3


# Singleton instances
PATHS = Paths()
DATABASE_SETTINGS = DatabaseSettings()
BRACKET_LAYOUT = BracketLayoutSettings()
EXPORT_SETTINGS = ExportSettings()
UI_SETTINGS = UISettings()
LOG_SETTINGS = LogSettings()


def init_logging(level: Optional[str] = None) -> None:
    """Send log records to stderr and a rotating file in the log directory."""
    root = logging.getLogger()
    root.setLevel(level or LOG_SETTINGS.level)
    formatter = logging.Formatter(LOG_SETTINGS.fmt)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        PATHS.log_file,
        maxBytes=LOG_SETTINGS.max_bytes,
        backupCount=LOG_SETTINGS.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def init_config() -> None:
    """Initialize configuration and create required directories."""
    PATHS.ensure_directories()
