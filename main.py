"""
KnockoutDesk - Desktop bracket console for knockout competitions

Entry point for the application.

Usage:
    python main.py [competition_id]
"""

import logging
import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from config import init_config, init_logging, APP_NAME, APP_AUTHOR, APP_VERSION


logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point for KnockoutDesk."""
    # Initialize configuration and directories
    init_config()
    init_logging()

    competition_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1

    # High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_AUTHOR)

    from gui.styles.theme import APP_STYLESHEET
    app.setStyleSheet(APP_STYLESHEET)

    # Initialize database
    from models.base import init_db
    init_db()

    logger.info("Starting %s %s for competition %s", APP_NAME, APP_VERSION, competition_id)

    # Create and show main window
    from app import KnockoutDeskApp
    knockout_app = KnockoutDeskApp(competition_id)
    knockout_app.reload()
    knockout_app.show()

    # Run event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
