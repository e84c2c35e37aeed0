"""
Tests for bracket export (CSV, PDF, PNG).
"""

import csv
import os
import sys

import pytest

from engine import generate_bracket, set_winner
from services.export import BracketExporter, fit_to_page


os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    """Create a QGuiApplication instance for the test session (needed for fonts)."""
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv)
    yield app


@pytest.fixture
def bracket():
    teams = [{"id": i, "name": f"Team {i}", "seed": i} for i in range(1, 6)]
    bracket = generate_bracket(teams, competition_id=1)
    set_winner(bracket, 2, 4)
    return bracket


class TestFitToPage:
    """Tests for page fitting."""

    def test_scales_down_to_fit(self):
        scale, x, y = fit_to_page(1000, 500, 600, 400, 50)
        assert scale == pytest.approx(0.5)
        assert x == pytest.approx(50)
        assert y == pytest.approx(75)

    def test_limited_by_height(self):
        scale, _, _ = fit_to_page(100, 1000, 600, 400, 0)
        assert scale == pytest.approx(0.4)


class TestCsvExport:
    """Tests for CSV export."""

    def test_one_row_per_match(self, bracket, tmp_path):
        path = tmp_path / "bracket.csv"

        assert BracketExporter().export_csv(bracket, path)

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 7
        assert rows[0]["round_name"] == "Quarter Finals"
        assert rows[0]["home_team"] == "Team 1"
        assert rows[0]["away_team"] == ""
        assert rows[0]["winner"] == "Team 1"
        assert rows[1]["winner"] == "Team 4"
        assert rows[1]["status"] == "completed"
        assert rows[-1]["round_name"] == "Final"

    def test_unwritable_path(self, bracket, tmp_path):
        path = tmp_path / "missing" / "bracket.csv"
        assert BracketExporter().export_csv(bracket, path) is False


class TestPdfExport:
    """Tests for PDF export."""

    def test_writes_pdf(self, bracket, tmp_path):
        path = tmp_path / "bracket.pdf"

        assert BracketExporter().export_pdf(bracket, path, title="Club Cup")

        with open(path, "rb") as f:
            assert f.read(4) == b"%PDF"

    def test_unwritable_path(self, bracket, tmp_path):
        path = tmp_path / "missing" / "bracket.pdf"
        assert BracketExporter().export_pdf(bracket, path) is False


class TestPngExport:
    """Tests for PNG export."""

    def test_writes_png(self, qapp, bracket, tmp_path):
        from PySide6.QtGui import QImage

        path = tmp_path / "bracket.png"
        exporter = BracketExporter(padding=10)

        assert exporter.export_png(bracket, path, scale=1.0)

        image = QImage(str(path))
        assert not image.isNull()
        bracket_layout = exporter.compute_layout(bracket)
        assert image.width() == int(bracket_layout.width + 20)
        assert image.height() == int(bracket_layout.height + 20)
