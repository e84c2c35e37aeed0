"""
Bracket Painter

Draws a computed BracketLayout with QPainter. Shared by the on-screen bracket
widget and the PNG exporter so both produce the same picture.
"""

from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QPainter, QPainterPath, QPen

from engine.bracket import Bracket, Match, Side
from engine.layout import BracketLayout, LayoutNode


@dataclass(frozen=True)
class BracketPalette:
    background: str
    line: str
    card: str
    card_border: str
    winner: str
    text: str
    muted: str


def slot_label(bracket: Bracket, match: Match, side: Side, max_chars: int = 22) -> str:
    """Team name for a slot, "BYE" for the empty side of a bye, else "TBD"."""
    team_id = match.team_in(side)
    if team_id is None:
        return "BYE" if match.is_bye else "TBD"
    name = bracket.team_name(team_id) or "TBD"
    if len(name) > max_chars:
        name = name[:max_chars - 1] + "…"
    return name


def score_label(match: Match, side: Side) -> str:
    score = match.home_score if side is Side.HOME else match.away_score
    if score is None:
        return ""
    return f"{score:g}"


def slot_rect(node: LayoutNode, side: Side, offset: float = 0.0) -> QRectF:
    """Rectangle of the home (upper) or away (lower) half of a node."""
    half = node.height / 2
    top = node.y + offset + (0 if side is Side.HOME else half)
    return QRectF(node.x + offset, top, node.width, half)


def paint_bracket(
    painter: QPainter,
    bracket: Bracket,
    layout: BracketLayout,
    palette: BracketPalette,
    padding: float = 0.0,
    highlight_match_id: Optional[int] = None,
    max_chars: int = 22,
) -> None:
    """Paint connectors first, then match cards on top."""
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)

    line_pen = QPen(QColor(palette.line))
    line_pen.setWidthF(2.0)
    painter.setPen(line_pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    for connector in layout.connectors:
        path = QPainterPath()
        first, *rest = connector.points
        path.moveTo(QPointF(first[0] + padding, first[1] + padding))
        for x, y in rest:
            path.lineTo(QPointF(x + padding, y + padding))
        painter.drawPath(path)

    name_font = QFont()
    name_font.setPointSizeF(10)
    bold_font = QFont(name_font)
    bold_font.setBold(True)

    for node in layout.nodes:
        match = bracket.get_match(node.match_id)
        card = QRectF(node.x + padding, node.y + padding, node.width, node.height)

        border = QPen(QColor(palette.winner if node.match_id == highlight_match_id else palette.card_border))
        border.setWidthF(1.5)
        painter.setPen(border)
        painter.setBrush(QColor(palette.card))
        painter.drawRoundedRect(card, 6, 6)

        # Divider between the two slots
        painter.setPen(QPen(QColor(palette.card_border)))
        painter.drawLine(
            QPointF(card.left(), card.center().y()),
            QPointF(card.right(), card.center().y()),
        )

        for side in (Side.HOME, Side.AWAY):
            rect = slot_rect(node, side, padding).adjusted(8, 0, -8, 0)
            is_winner = match.is_decided and match.team_in(side) == match.winner_team_id
            has_team = match.team_in(side) is not None

            if is_winner:
                color = palette.winner
            elif has_team:
                color = palette.text
            else:
                color = palette.muted

            painter.setPen(QColor(color))
            painter.setFont(bold_font if is_winner else name_font)
            painter.drawText(
                rect,
                Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft,
                slot_label(bracket, match, side, max_chars),
            )
            painter.drawText(
                rect,
                Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignRight,
                score_label(match, side),
            )
