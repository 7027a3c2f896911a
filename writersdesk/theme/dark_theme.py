"""
writersdesk/theme/dark_theme.py -- Dark theme configuration.

Applies qt-material's dark_teal theme with custom QSS overrides for the
floating panels of the layout canvas.

Usage::

    from writersdesk.theme.dark_theme import apply_theme
    apply_theme(app)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtWidgets import QApplication

logger = logging.getLogger(__name__)

_CUSTOM_QSS = """
/* Layout canvas background */
QWidget#layoutCanvas {
    background-color: #1e2326;
}

/* Floating panels */
QFrame#panelFrame {
    background-color: #263238;
    border: 1px solid #37474f;
    border-radius: 4px;
}

QFrame#panelFrame[dragging="true"] {
    border: 1px solid #1de9b6;
}

QWidget#panelHeader {
    background-color: #31363b;
    border-top-left-radius: 4px;
    border-top-right-radius: 4px;
}

QWidget#panelHeader QPushButton {
    padding: 0px;
    font-size: 14px;
    min-width: 0px;
}

/* Section navigation */
QToolBar QToolButton {
    padding: 4px 12px;
}

QStatusBar {
    font-size: 12px;
}
"""


def apply_theme(app: "QApplication") -> None:
    """Apply the dark teal material theme with custom overrides.

    Parameters
    ----------
    app : QApplication
        The application instance to theme.
    """
    try:
        from qt_material import apply_stylesheet
        apply_stylesheet(app, theme="dark_teal.xml")
        logger.info("Applied qt-material dark_teal theme")
    except Exception:
        logger.warning("qt-material theme failed, falling back to Fusion", exc_info=True)
        from PySide6.QtWidgets import QApplication
        QApplication.setStyle("Fusion")

    existing = app.styleSheet() or ""
    app.setStyleSheet(existing + _CUSTOM_QSS)
