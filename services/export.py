"""
Bracket Export

Render the knockout bracket as a PNG image or a PDF document, and dump the
match list as CSV for analysis. All drawing is driven by the engine's layout,
so exports match what the operator sees on screen.
"""

import csv
import logging
from pathlib import Path
from typing import Optional, Union

from PySide6.QtGui import QColor, QImage, QPainter
from reportlab.lib import colors
from reportlab.lib import pagesizes
from reportlab.pdfgen import canvas as pdf_canvas

from config import BRACKET_LAYOUT, EXPORT_SETTINGS, UI_SETTINGS
from engine.bracket import Bracket, Side
from engine.layout import BracketLayout, LayoutDimensions, layout
from gui.bracket_painter import paint_bracket, slot_label
from gui.styles.theme import EXPORT_PALETTE


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def default_dimensions() -> LayoutDimensions:
    return LayoutDimensions(
        match_width=BRACKET_LAYOUT.match_width,
        match_height=BRACKET_LAYOUT.match_height,
        round_gap_x=BRACKET_LAYOUT.round_gap_x,
        match_gap_y=BRACKET_LAYOUT.match_gap_y,
    )


def fit_to_page(content_width: float, content_height: float, page_width: float,
                page_height: float, margin: float) -> tuple[float, float, float]:
    """
    Scale and offset that fit the content inside the page margins, centred.

    Returns:
        (scale, x_offset, y_offset)
    """
    avail_w = page_width - 2 * margin
    avail_h = page_height - 2 * margin
    scale = min(avail_w / content_width, avail_h / content_height)
    x = (page_width - content_width * scale) / 2
    y = (page_height - content_height * scale) / 2
    return scale, x, y


class BracketExporter:
    """
    Export a bracket to PNG, PDF or CSV.

    Each export returns True on success and False when writing failed; the
    failure is logged.
    """

    def __init__(self, dims: Optional[LayoutDimensions] = None, padding: Optional[float] = None):
        self.dims = dims or default_dimensions()
        self.padding = BRACKET_LAYOUT.padding if padding is None else padding

    def compute_layout(self, bracket: Bracket) -> BracketLayout:
        return layout(
            bracket,
            self.dims.match_width,
            self.dims.match_height,
            self.dims.round_gap_x,
            self.dims.match_gap_y,
        )

    # -------------------------------------------------------------------------
    # PNG
    # -------------------------------------------------------------------------

    def export_png(self, bracket: Bracket, filepath: PathLike, scale: Optional[float] = None) -> bool:
        """
        Rasterise the bracket to a PNG file.

        Needs a QGuiApplication (fonts are resolved through it).
        """
        scale = scale or EXPORT_SETTINGS.png_scale
        bracket_layout = self.compute_layout(bracket)
        width = int((bracket_layout.width + 2 * self.padding) * scale)
        height = int((bracket_layout.height + 2 * self.padding) * scale)

        try:
            image = QImage(width, height, QImage.Format.Format_ARGB32)
            image.fill(QColor(EXPORT_SETTINGS.background_color))

            painter = QPainter(image)
            try:
                painter.scale(scale, scale)
                paint_bracket(
                    painter, bracket, bracket_layout, EXPORT_PALETTE,
                    padding=self.padding,
                    max_chars=UI_SETTINGS.max_team_name_chars,
                )
            finally:
                painter.end()

            if not image.save(str(filepath), "PNG"):
                raise OSError(f"Could not write image to {filepath}")
            logger.info("Exported bracket PNG to %s (%dx%d)", filepath, width, height)
            return True

        except Exception:
            logger.exception("PNG export failed for %s", filepath)
            return False

    # -------------------------------------------------------------------------
    # PDF
    # -------------------------------------------------------------------------

    def export_pdf(self, bracket: Bracket, filepath: PathLike, title: Optional[str] = None) -> bool:
        """
        Draw the bracket as vectors on a single PDF page.

        The page is landscape when the bracket is wider than tall, and the
        drawing is scaled to fit inside the margins.
        """
        bracket_layout = self.compute_layout(bracket)
        base = getattr(pagesizes, EXPORT_SETTINGS.pdf_page_size.upper(), pagesizes.A4)
        if bracket_layout.width >= bracket_layout.height:
            page_size = pagesizes.landscape(base)
        else:
            page_size = pagesizes.portrait(base)
        page_w, page_h = page_size

        margin = EXPORT_SETTINGS.pdf_margin_pt
        title_space = 24 if title else 0
        scale, off_x, off_y = fit_to_page(
            bracket_layout.width, bracket_layout.height,
            page_w, page_h - title_space, margin,
        )

        def to_page(x: float, y: float) -> tuple[float, float]:
            # reportlab's origin is bottom-left
            return off_x + x * scale, page_h - title_space - (off_y + y * scale)

        try:
            pdf = pdf_canvas.Canvas(str(filepath), pagesize=page_size)
            pdf.setTitle(title or "Tournament bracket")

            if title:
                pdf.setFont("Helvetica-Bold", 14)
                pdf.setFillColor(colors.HexColor(EXPORT_SETTINGS.text_color))
                pdf.drawCentredString(page_w / 2, page_h - margin, title)

            pdf.setStrokeColor(colors.HexColor(EXPORT_SETTINGS.line_color))
            pdf.setLineWidth(max(0.5, 1.5 * scale))
            for connector in bracket_layout.connectors:
                path = pdf.beginPath()
                first, *rest = connector.points
                path.moveTo(*to_page(*first))
                for point in rest:
                    path.lineTo(*to_page(*point))
                pdf.drawPath(path, stroke=1, fill=0)

            font_size = max(5.0, 10 * scale)
            for node in bracket_layout.nodes:
                match = bracket.get_match(node.match_id)
                left, top = to_page(node.x, node.y)
                w, h = node.width * scale, node.height * scale

                pdf.setFillColor(colors.HexColor(EXPORT_SETTINGS.card_color))
                pdf.setStrokeColor(colors.HexColor(EXPORT_SETTINGS.line_color))
                pdf.roundRect(left, top - h, w, h, 4 * scale, stroke=1, fill=1)
                pdf.line(left, top - h / 2, left + w, top - h / 2)

                for side in (Side.HOME, Side.AWAY):
                    _, slot_y = to_page(node.x, node.slot_y(side))
                    is_winner = match.is_decided and match.team_in(side) == match.winner_team_id
                    pdf.setFont("Helvetica-Bold" if is_winner else "Helvetica", font_size)
                    pdf.setFillColor(colors.HexColor(
                        EXPORT_SETTINGS.winner_color if is_winner else EXPORT_SETTINGS.text_color
                    ))
                    baseline = slot_y - font_size / 3
                    label = slot_label(bracket, match, side, UI_SETTINGS.max_team_name_chars)
                    pdf.drawString(left + 6 * scale, baseline, label)
                    score = match.home_score if side is Side.HOME else match.away_score
                    if score is not None:
                        pdf.drawRightString(left + w - 6 * scale, baseline, f"{score:g}")

            pdf.showPage()
            pdf.save()
            logger.info("Exported bracket PDF to %s", filepath)
            return True

        except Exception:
            logger.exception("PDF export failed for %s", filepath)
            return False

    # -------------------------------------------------------------------------
    # CSV
    # -------------------------------------------------------------------------

    def export_csv(self, bracket: Bracket, filepath: PathLike) -> bool:
        """Export one row per match for analysis."""
        try:
            with open(filepath, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow([
                    "round_number", "round_name", "match_number", "match_id",
                    "home_team", "away_team", "home_score", "away_score",
                    "winner", "status",
                ])
                for rnd in bracket.rounds:
                    for match in rnd.matches:
                        writer.writerow([
                            rnd.round_number,
                            rnd.name,
                            match.match_number,
                            match.id,
                            bracket.team_name(match.home_team_id) or "",
                            bracket.team_name(match.away_team_id) or "",
                            "" if match.home_score is None else match.home_score,
                            "" if match.away_score is None else match.away_score,
                            bracket.team_name(match.winner_team_id) or "",
                            match.status.value,
                        ])

            logger.info("Exported bracket CSV to %s", filepath)
            return True

        except OSError:
            logger.exception("CSV export failed for %s", filepath)
            return False
