"""
writersdesk/widgets/panel_frame.py -- Rendered surface of a floating panel.

A header strip (title + close button) over a content area.  The frame is
purely visual; position, size, visibility and stacking all come from the
layout engine's ``PanelInstance`` via ``LayoutCanvas``.  Dragging starts
from the header, which carries the ``panel_id`` property the canvas looks
for.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

HEADER_OBJECT_NAME = "panelHeader"
HEADER_HEIGHT = 30


class PanelFrame(QFrame):
    """Floating panel with a draggable header."""

    close_requested = Signal(str)

    def __init__(self, panel_id: str, title: str, parent: QWidget | None = None):
        super().__init__(parent)
        self._panel_id = panel_id
        self.setObjectName("panelFrame")
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self._setup_ui(title)

    @property
    def panel_id(self) -> str:
        return self._panel_id

    @property
    def header(self) -> QWidget:
        return self._header

    def _setup_ui(self, title: str) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._header = QWidget()
        self._header.setObjectName(HEADER_OBJECT_NAME)
        self._header.setProperty("panel_id", self._panel_id)
        self._header.setFixedHeight(HEADER_HEIGHT)
        self._header.setCursor(Qt.CursorShape.OpenHandCursor)

        header_row = QHBoxLayout(self._header)
        header_row.setContentsMargins(8, 0, 4, 0)

        self._title = QLabel(title)
        self._title.setStyleSheet("font-weight: bold;")
        header_row.addWidget(self._title, 1)

        self._close_btn = QPushButton("×")
        self._close_btn.setFixedSize(22, 22)
        self._close_btn.setToolTip("Close panel")
        self._close_btn.clicked.connect(lambda: self.close_requested.emit(self._panel_id))
        header_row.addWidget(self._close_btn)

        layout.addWidget(self._header)

        self._content = QWidget()
        self._content.setObjectName("panelContent")
        content_layout = QVBoxLayout(self._content)
        content_layout.setContentsMargins(8, 8, 8, 8)
        self._placeholder = QLabel(f"Panel: {title}")
        self._placeholder.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
        content_layout.addWidget(self._placeholder)
        layout.addWidget(self._content, 1)

    def title(self) -> str:
        return self._title.text()

    def set_dragging(self, dragging: bool) -> None:
        self.setProperty("dragging", dragging)
        self._header.setCursor(
            Qt.CursorShape.ClosedHandCursor if dragging else Qt.CursorShape.OpenHandCursor
        )
        # Re-polish so the [dragging="true"] QSS selector applies
        self.style().unpolish(self)
        self.style().polish(self)
