"""
writersdesk/main.py -- Application entry point.

Initializes the QApplication, applies the dark theme, loads the layout
state, creates the MainWindow, and runs the event loop.  On exit the
in-memory state is written one last time.

Usage::

    python -m writersdesk.main
    # or, once installed
    writersdesk
"""

from __future__ import annotations

import os
os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

import logging
import sys
import traceback

from writersdesk.paths import get_state_dir, is_frozen


def _setup_logging() -> None:
    """Configure logging for the desktop application."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _global_exception_hook(exc_type, exc_value, exc_tb):
    """Last-resort handler for uncaught exceptions.

    Logs the traceback and shows a message box (if a QApplication exists).
    """
    logger = logging.getLogger("writersdesk")
    logger.critical(
        "Uncaught exception: %s",
        "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
    )

    try:
        from PySide6.QtWidgets import QApplication, QMessageBox
        app = QApplication.instance()
        if app is not None:
            QMessageBox.critical(
                None,
                "Unexpected Error",
                f"An unexpected error occurred:\n\n{exc_value}\n\n"
                "The application will attempt to continue.\n"
                "Please check the logs for details.",
            )
    except Exception:
        pass  # Can't show GUI -- already logged above


def main() -> int:
    """Launch Writers Desk."""
    _setup_logging()
    logger = logging.getLogger("writersdesk")
    logger.info("Starting Writers Desk")

    sys.excepthook = _global_exception_hook

    state_dir = get_state_dir()
    logger.info("State directory: %s (frozen=%s)", state_dir, is_frozen())

    # Must create QApplication before anything else Qt-related
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication(sys.argv)

    from writersdesk.theme.dark_theme import apply_theme
    apply_theme(app)

    # Load layout state before anything renders
    from writersdesk.services.state_store import StateStore
    store = StateStore.instance(state_dir)
    logger.info("State store initialized (configured sections: %s)", store.configured_sections())

    from writersdesk.main_window import MainWindow
    window = MainWindow(state_store=store)
    window.show()
    window.start()
    logger.info("Main window displayed")

    exit_code = app.exec()

    logger.info("Shutting down...")
    try:
        store.shutdown()
    except Exception:
        logger.exception("Error during state store shutdown")

    logger.info("Goodbye!")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
