"""
KnockoutDesk theme - colors, spacing, and typography constants.

Dark console UI; exports use a light palette so they print well.
"""

from config import EXPORT_SETTINGS
from gui.bracket_painter import BracketPalette

# Accents
PRIMARY_GOLD = "#E8B923"      # Winners, highlights
PRIMARY_GREEN = "#0D7A3E"     # Success
PRIMARY_RED = "#C41E2E"       # Errors, clear actions

# Surfaces
SURFACE_MAIN = "#16161F"      # Main window base
SURFACE_CARD = "#1C1C28"      # Cards, panels
SURFACE_ELEVATED = "#222230"  # Hover, selected

# Borders
BORDER_DEFAULT = "#3A3A4C"
BORDER_ACCENT = "#4A4A5E"

# Text
TEXT_PRIMARY = "#F0F0F5"
TEXT_SECONDARY = "#A8A8B8"
TEXT_MUTED = "#6A6A7A"

# Spacing scale (px)
SPACING_SM = 8
SPACING_MD = 12
SPACING_LG = 16
SPACING_XL = 24

# Border radius (px)
RADIUS_SM = 6
RADIUS_MD = 10

# Font sizes (pt)
FONT_SIZE_BASE = 10
FONT_SIZE_LG = 13
FONT_SIZE_XL = 16

# Bracket drawing
SCREEN_PALETTE = BracketPalette(
    background=SURFACE_MAIN,
    line=BORDER_ACCENT,
    card=SURFACE_CARD,
    card_border=BORDER_DEFAULT,
    winner=PRIMARY_GOLD,
    text=TEXT_PRIMARY,
    muted=TEXT_MUTED,
)

EXPORT_PALETTE = BracketPalette(
    background=EXPORT_SETTINGS.background_color,
    line=EXPORT_SETTINGS.line_color,
    card=EXPORT_SETTINGS.card_color,
    card_border=EXPORT_SETTINGS.line_color,
    winner=EXPORT_SETTINGS.winner_color,
    text=EXPORT_SETTINGS.text_color,
    muted="#8A8A9A",
)

# Application stylesheet
APP_STYLESHEET = f"""
    QMainWindow, QWidget {{
        background-color: {SURFACE_MAIN};
        color: {TEXT_PRIMARY};
        font-size: {FONT_SIZE_BASE}pt;
    }}
    QListWidget {{
        background-color: {SURFACE_CARD};
        border: 1px solid {BORDER_DEFAULT};
        border-radius: {RADIUS_SM}px;
    }}
    QListWidget::item:selected {{
        background-color: {SURFACE_ELEVATED};
    }}
    QPushButton {{
        background-color: {SURFACE_CARD};
        border: 1px solid {BORDER_DEFAULT};
        border-radius: {RADIUS_SM}px;
        padding: {SPACING_SM}px {SPACING_LG}px;
    }}
    QPushButton:hover {{
        background-color: {SURFACE_ELEVATED};
        border-color: {BORDER_ACCENT};
    }}
"""
