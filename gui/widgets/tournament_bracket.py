"""
Tournament Bracket Widget

Interactive knockout bracket: a roster of registered teams that can be
dragged into first-round slots, and a canvas drawing the computed layout.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QScrollArea, QListWidget, QListWidgetItem,
    QPushButton, QAbstractItemView, QMenu
)
from PySide6.QtCore import Qt, Signal, QMimeData, QSize
from PySide6.QtGui import QPainter, QColor, QDrag

from config import BRACKET_LAYOUT, UI_SETTINGS
from engine.bracket import Bracket, Side
from engine.layout import BracketLayout, LayoutDimensions, layout
from gui.bracket_painter import paint_bracket
from gui.styles.theme import (
    SURFACE_CARD, SURFACE_MAIN,
    BORDER_DEFAULT,
    TEXT_PRIMARY, TEXT_SECONDARY, TEXT_MUTED,
    PRIMARY_GOLD,
    SPACING_SM, SPACING_MD, SPACING_LG, SPACING_XL,
    RADIUS_SM, RADIUS_MD,
    FONT_SIZE_LG, FONT_SIZE_XL,
    SCREEN_PALETTE,
)


TEAM_MIME_TYPE = "application/x-knockoutdesk-team-id"


def slot_at(bracket_layout: BracketLayout, x: float, y: float) -> Optional[tuple[int, Side]]:
    """Match id and side under a point in layout coordinates, if any."""
    for node in bracket_layout.nodes:
        if node.x <= x <= node.right and node.y <= y <= node.bottom:
            side = Side.HOME if y < node.y + node.height / 2 else Side.AWAY
            return node.match_id, side
    return None


class TeamRoster(QListWidget):
    """List of teams that can be dragged onto bracket slots."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setDragEnabled(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DragOnly)
        self.setMinimumWidth(200)

    def set_teams(self, teams: list[tuple[int, str]]) -> None:
        self.clear()
        for team_id, name in teams:
            item = QListWidgetItem(name)
            item.setData(Qt.ItemDataRole.UserRole, team_id)
            self.addItem(item)

    def startDrag(self, supported_actions) -> None:
        item = self.currentItem()
        if item is None:
            return
        mime = QMimeData()
        mime.setData(TEAM_MIME_TYPE, str(item.data(Qt.ItemDataRole.UserRole)).encode())
        mime.setText(item.text())
        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.exec(Qt.DropAction.CopyAction)


class BracketCanvas(QWidget):
    """
    Draws the bracket and turns mouse input into bracket requests.

    - Drop a team on a slot: assign_requested
    - Click a team in a match with both teams: winner_requested
    - Right-click a filled slot: clear_requested
    """

    assign_requested = Signal(int, str, int)  # match_id, side, team_id
    clear_requested = Signal(int, str)        # match_id, side
    winner_requested = Signal(int, int)       # match_id, team_id

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.bracket: Optional[Bracket] = None
        self.bracket_layout: Optional[BracketLayout] = None
        self.highlight_match_id: Optional[int] = None
        self.padding = BRACKET_LAYOUT.padding
        self.dims = LayoutDimensions(
            match_width=BRACKET_LAYOUT.match_width,
            match_height=BRACKET_LAYOUT.match_height,
            round_gap_x=BRACKET_LAYOUT.round_gap_x,
            match_gap_y=BRACKET_LAYOUT.match_gap_y,
        )

        self.setAcceptDrops(True)
        self.setMouseTracking(True)

    def set_bracket(self, bracket: Optional[Bracket]) -> None:
        self.bracket = bracket
        if bracket is None:
            self.bracket_layout = None
        else:
            self.bracket_layout = layout(
                bracket,
                self.dims.match_width,
                self.dims.match_height,
                self.dims.round_gap_x,
                self.dims.match_gap_y,
            )
        self.updateGeometry()
        self.adjustSize()
        self.update()

    def sizeHint(self) -> QSize:
        if self.bracket_layout is None:
            return QSize(400, 300)
        return QSize(
            int(self.bracket_layout.width + 2 * self.padding),
            int(self.bracket_layout.height + 2 * self.padding),
        )

    def _slot_at(self, pos) -> Optional[tuple[int, Side]]:
        if self.bracket_layout is None:
            return None
        return slot_at(self.bracket_layout, pos.x() - self.padding, pos.y() - self.padding)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(SCREEN_PALETTE.background))
        if self.bracket is not None and self.bracket_layout is not None:
            paint_bracket(
                painter, self.bracket, self.bracket_layout, SCREEN_PALETTE,
                padding=self.padding,
                highlight_match_id=self.highlight_match_id,
                max_chars=UI_SETTINGS.max_team_name_chars,
            )
        painter.end()

    def mouseMoveEvent(self, event):
        hit = self._slot_at(event.position())
        match_id = hit[0] if hit else None
        if match_id != self.highlight_match_id:
            self.highlight_match_id = match_id
            self.update()

    def mousePressEvent(self, event):
        hit = self._slot_at(event.position())
        if hit is None or self.bracket is None:
            return
        match_id, side = hit
        match = self.bracket.get_match(match_id)
        team_id = match.team_in(side)
        if team_id is None:
            return

        if event.button() == Qt.MouseButton.RightButton:
            menu = QMenu(self)
            clear_action = menu.addAction(f"Remove {self.bracket.team_name(team_id)}")
            chosen = menu.exec(event.globalPosition().toPoint())
            if chosen is clear_action:
                self.clear_requested.emit(match_id, side.value)
        elif event.button() == Qt.MouseButton.LeftButton and match.is_ready and not match.is_bye:
            self.winner_requested.emit(match_id, team_id)

    def dragEnterEvent(self, event):
        if event.mimeData().hasFormat(TEAM_MIME_TYPE):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if self._slot_at(event.position()) is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):
        hit = self._slot_at(event.position())
        if hit is None:
            event.ignore()
            return
        team_id = int(bytes(event.mimeData().data(TEAM_MIME_TYPE)).decode())
        match_id, side = hit
        event.acceptProposedAction()
        self.assign_requested.emit(match_id, side.value, team_id)


class TournamentBracketWidget(QWidget):
    """
    Bracket screen: roster, canvas and export buttons.

    Usage:
        widget = TournamentBracketWidget()
        widget.set_tournament(controller)
    """

    export_requested = Signal(str)  # "png", "pdf" or "csv"

    def __init__(self, event_bus=None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.event_bus = event_bus
        self.tournament = None

        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(SPACING_LG, SPACING_LG, SPACING_LG, SPACING_LG)
        layout.setSpacing(SPACING_MD)

        # Header
        header_layout = QHBoxLayout()

        title = QLabel("Tournament Bracket")
        title.setStyleSheet(f"""
            color: {TEXT_PRIMARY};
            font-size: {FONT_SIZE_XL}pt;
            font-weight: bold;
        """)
        header_layout.addWidget(title)

        self.stage_label = QLabel("")
        self.stage_label.setStyleSheet(f"""
            color: {PRIMARY_GOLD};
            font-size: {FONT_SIZE_LG}pt;
            padding: {SPACING_SM}px {SPACING_MD}px;
            background-color: {SURFACE_CARD};
            border-radius: {RADIUS_SM}px;
        """)
        header_layout.addStretch()
        header_layout.addWidget(self.stage_label)

        for fmt in ("png", "pdf", "csv"):
            button = QPushButton(f"Export {fmt.upper()}")
            button.clicked.connect(lambda _=False, f=fmt: self.export_requested.emit(f))
            header_layout.addWidget(button)

        layout.addLayout(header_layout)

        # Body: roster on the left, bracket on the right
        body = QHBoxLayout()
        body.setSpacing(SPACING_MD)

        roster_col = QVBoxLayout()
        roster_title = QLabel("Teams")
        roster_title.setStyleSheet(f"color: {TEXT_SECONDARY}; font-weight: bold;")
        roster_col.addWidget(roster_title)
        self.roster = TeamRoster()
        roster_col.addWidget(self.roster, 1)
        body.addLayout(roster_col)

        self.canvas = BracketCanvas()
        self.canvas.assign_requested.connect(self._on_assign_requested)
        self.canvas.clear_requested.connect(self._on_clear_requested)
        self.canvas.winner_requested.connect(self._on_winner_requested)

        self.scroll = QScrollArea()
        self.scroll.setWidget(self.canvas)
        self.scroll.setWidgetResizable(False)
        self.scroll.setStyleSheet(f"""
            QScrollArea {{
                border: 1px solid {BORDER_DEFAULT};
                border-radius: {RADIUS_MD}px;
                background-color: {SURFACE_MAIN};
            }}
        """)
        body.addWidget(self.scroll, 1)

        layout.addLayout(body, 1)

        # Placeholder message when no bracket
        self.placeholder = QLabel(
            "No bracket yet.\n\n"
            "Register at least four teams and press Generate Bracket."
        )
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.placeholder.setStyleSheet(f"""
            color: {TEXT_MUTED};
            font-size: {FONT_SIZE_LG}pt;
            padding: {SPACING_XL}px;
        """)
        layout.addWidget(self.placeholder)

        self.scroll.hide()
        self.placeholder.show()

    def update_bracket(self) -> None:
        """Redraw from the connected controller."""
        bracket = self.tournament.bracket if self.tournament else None
        self.canvas.set_bracket(bracket)

        if bracket is None:
            self.scroll.hide()
            self.placeholder.show()
            self.stage_label.setText("")
            self.roster.set_teams([])
            return

        self.scroll.show()
        self.placeholder.hide()

        champion = bracket.champion()
        if champion is not None:
            self.stage_label.setText(f"Champion: {bracket.team_name(champion)}")
        else:
            current = bracket.current_round()
            names = {r.round_number: r.name for r in bracket.rounds}
            self.stage_label.setText(names.get(current, ""))

        self.roster.set_teams([(t.team_id, t.team_name) for t in self.tournament.unplaced_teams()])

    def set_tournament(self, tournament_bracket) -> None:
        """
        Connect to a TournamentBracket controller.

        Args:
            tournament_bracket: TournamentBracket instance
        """
        if self.tournament is not None:
            self.tournament.bracket_updated.disconnect(self.update_bracket)
        self.tournament = tournament_bracket
        if tournament_bracket:
            tournament_bracket.bracket_updated.connect(self.update_bracket)
        self.update_bracket()

    def _report(self, level: str, message: str) -> None:
        if self.event_bus is not None:
            self.event_bus.emit_message(level, message)

    def _run(self, action: str, *args) -> None:
        """Apply a controller action, reporting rejected moves instead of raising."""
        if self.tournament is None:
            return
        try:
            getattr(self.tournament, action)(*args)
        except ValueError as e:
            self._report("warning", str(e))

    def _on_assign_requested(self, match_id: int, side: str, team_id: int) -> None:
        self._run("assign_team", match_id, side, team_id)

    def _on_clear_requested(self, match_id: int, side: str) -> None:
        self._run("clear_slot", match_id, side)

    def _on_winner_requested(self, match_id: int, team_id: int) -> None:
        self._run("set_winner", match_id, team_id)
