"""
KnockoutDesk GUI

PySide6 user interface components.
"""

from gui.main_window import MainWindow

__all__ = [
    "MainWindow",
]
