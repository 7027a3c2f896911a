"""
writersdesk/widgets/setup_dialog.py -- One-time panel selection for a section.

Shown the first time a section is opened.  Lists the section's template
panels as checkboxes, all checked, and returns the ids the user kept.
An empty selection is allowed and leaves the section without panels.
"""

from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from panel_engine.setup_flow import PanelSelector
from panel_engine.templates import PanelConfig, get_section_title

logger = logging.getLogger(__name__)


class SetupDialog(QDialog):
    """Checkbox list of a section's template panels."""

    def __init__(
        self,
        section_title: str,
        panels: Sequence[PanelConfig],
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self._panels = list(panels)
        self._checkboxes: dict[str, QCheckBox] = {}
        self.setWindowTitle(f"Setup {section_title} Section")
        self.setModal(True)
        self.setMinimumWidth(360)
        self._setup_ui(section_title)

    def _setup_ui(self, section_title: str) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)

        title = QLabel(f"Setup {section_title} Section")
        title.setStyleSheet("font-size: 16px; font-weight: bold;")
        layout.addWidget(title)

        desc = QLabel(
            "Select which panels you want to use in this section. "
            "You can always customize this later!"
        )
        desc.setWordWrap(True)
        desc.setStyleSheet("font-size: 12px; color: #aaa;")
        layout.addWidget(desc)

        for panel in self._panels:
            checkbox = QCheckBox(panel.title)
            checkbox.setChecked(True)
            self._checkboxes[panel.id] = checkbox
            layout.addWidget(checkbox)

        layout.addStretch()

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._continue_btn = QPushButton("Continue")
        self._continue_btn.setDefault(True)
        self._continue_btn.clicked.connect(self.accept)
        btn_row.addWidget(self._continue_btn)
        layout.addLayout(btn_row)

    def set_checked(self, panel_id: str, checked: bool) -> None:
        checkbox = self._checkboxes.get(panel_id)
        if checkbox is not None:
            checkbox.setChecked(checked)

    def selected_ids(self) -> list[str]:
        """Return the checked panel ids in template order."""
        return [p.id for p in self._panels if self._checkboxes[p.id].isChecked()]

    def reject(self) -> None:
        # Setup cannot be skipped; closing the dialog keeps the current checks.
        self.accept()


def dialog_selector(parent: QWidget | None = None) -> PanelSelector:
    """Return a selector that asks the user through a modal SetupDialog."""

    def _select(section: str, panels: Sequence[PanelConfig]) -> list[str]:
        dialog = SetupDialog(get_section_title(section), panels, parent)
        dialog.exec()
        selected = dialog.selected_ids()
        logger.info("Setup dialog for %s returned %s", section, selected)
        dialog.deleteLater()
        return selected

    return _select
