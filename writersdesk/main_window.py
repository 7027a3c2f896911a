"""
writersdesk/main_window.py -- Main application window.

Hosts the layout canvas for the active section, a toolbar to switch
sections, a View menu to show/hide the section's panels, a Characters
menu for the list/card/importance views and the editor split, and a
status bar.  Window geometry is saved/restored via QSettings; panel
layouts go through the StateStore.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QSettings, QTimer
from PySide6.QtGui import QAction, QActionGroup, QCloseEvent, QKeySequence
from PySide6.QtWidgets import (
    QMainWindow,
    QMenu,
    QStatusBar,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from panel_engine.setup_flow import PanelSelector
from panel_engine.split_layout import ViewMode
from panel_engine.templates import CHARACTER_EDITOR_PANEL, SECTION_NAMES, get_section_title
from panel_engine.workspace import CHARACTERS_SECTION, SectionWorkspace
from writersdesk.services.event_bus import EventBus
from writersdesk.services.state_store import StateStore
from writersdesk.widgets.layout_canvas import LayoutCanvas
from writersdesk.widgets.setup_dialog import dialog_selector

logger = logging.getLogger(__name__)

_ORG_NAME = "WritersDesk"
_APP_NAME = "WritersDesk"

RESIZE_DEBOUNCE_MS = 150


class MainWindow(QMainWindow):
    """Main application window with a freeform panel canvas.

    Layout
    ------
    ::

        +------------------------------------------+
        | Writing | Plotting | Characters | ...    |  <- section toolbar
        +------------------------------------------+
        |   +---------+  +------------+            |
        |   | Panel   |  | Panel      |   canvas   |
        |   +---------+  +------------+            |
        +------------------------------------------+
        | status                                   |
        +------------------------------------------+
    """

    def __init__(
        self,
        state_store: StateStore | None = None,
        selector: PanelSelector | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self._settings = QSettings(_ORG_NAME, _APP_NAME)
        self._bus = EventBus.instance()
        self._selector = selector or dialog_selector(self)

        self.setWindowTitle("Writers Desk")
        self.setMinimumSize(1024, 700)

        self._workspace = SectionWorkspace(state_store, on_saved=self._bus.layout_saved.emit)
        self._workspace.load()

        # Central widget -- the layout canvas fills the window
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        self._canvas = LayoutCanvas(self._workspace, central)
        layout.addWidget(self._canvas)
        self.setCentralWidget(central)

        # Window resizes settle before the split is recomputed
        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.setInterval(RESIZE_DEBOUNCE_MS)
        self._resize_timer.timeout.connect(self._apply_container_size)
        self._canvas.resized.connect(lambda _w, _h: self._resize_timer.start())

        self._build_toolbar()
        self._build_menus()

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready")

        self._bus.status_message.connect(self._on_status_message)
        self._bus.error_occurred.connect(self._on_error)
        self._bus.panel_visibility_changed.connect(self._on_panel_visibility_changed)

        self._restore_geometry()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def workspace(self) -> SectionWorkspace:
        return self._workspace

    @property
    def canvas(self) -> LayoutCanvas:
        return self._canvas

    # ------------------------------------------------------------------
    # Toolbar / menus
    # ------------------------------------------------------------------

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Sections", self)
        toolbar.setObjectName("sectionToolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._section_group = QActionGroup(self)
        self._section_group.setExclusive(True)
        self._section_actions: dict[str, QAction] = {}
        for index, section in enumerate(SECTION_NAMES, start=1):
            action = QAction(get_section_title(section), self)
            action.setCheckable(True)
            action.setShortcut(QKeySequence(f"Ctrl+{index}"))
            action.triggered.connect(lambda _checked=False, s=section: self.switch_section(s))
            self._section_group.addAction(action)
            toolbar.addAction(action)
            self._section_actions[section] = action

    def _build_menus(self) -> None:
        menubar = self.menuBar()

        # --- View menu: one toggle per panel of the active section ---
        self._view_menu = QMenu("&View", self)
        menubar.addMenu(self._view_menu)
        self._panel_actions: dict[str, QAction] = {}

        # --- Characters menu ---
        self._characters_menu = QMenu("&Characters", self)
        menubar.addMenu(self._characters_menu)

        view_group = QActionGroup(self)
        view_group.setExclusive(True)
        self._view_mode_actions: dict[ViewMode, QAction] = {}
        for mode in ViewMode:
            action = QAction(f"{mode.value.title()} View", self)
            action.setCheckable(True)
            action.setChecked(mode is self._workspace.characters.view_mode)
            action.triggered.connect(lambda _checked=False, m=mode: self.set_character_view(m))
            view_group.addAction(action)
            self._characters_menu.addAction(action)
            self._view_mode_actions[mode] = action

        self._characters_menu.addSeparator()
        self._editor_action = QAction("Show Editor", self)
        self._editor_action.setCheckable(True)
        self._editor_action.setShortcut(QKeySequence("Ctrl+E"))
        self._editor_action.triggered.connect(self.set_editor_visible)
        self._characters_menu.addAction(self._editor_action)
        self._characters_menu.setEnabled(False)

    def _rebuild_view_menu(self) -> None:
        self._view_menu.clear()
        self._panel_actions.clear()
        for instance in self._workspace.store:
            action = QAction(instance.title, self)
            action.setCheckable(True)
            action.setChecked(instance.visible)
            action.triggered.connect(
                lambda checked, pid=instance.id: self._set_panel_visible(pid, checked)
            )
            self._view_menu.addAction(action)
            self._panel_actions[instance.id] = action
        if not self._panel_actions:
            empty = QAction("No panels", self)
            empty.setEnabled(False)
            self._view_menu.addAction(empty)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Open the first section once the window has been laid out."""
        QTimer.singleShot(0, lambda: self.switch_section(SECTION_NAMES[0]))

    def switch_section(self, section: str) -> None:
        if self._workspace.drag.is_dragging:
            self._workspace.drag.end()
        self._apply_container_size()

        if self._workspace.needs_setup(section):
            self._status_bar.showMessage(f"Choose the panels for {get_section_title(section)}")

        instances =self._workspace.switch_section(section, self._selector, self._canvas)
        action = self._section_actions.get(section)
        if action is not None:
            action.setChecked(True)

        is_characters = section == CHARACTERS_SECTION
        self._characters_menu.setEnabled(is_characters)
        self._editor_action.setChecked(
            is_characters and self._workspace.store.is_visible(CHARACTER_EDITOR_PANEL)
        )
        self._rebuild_view_menu()

        self._bus.section_changed.emit(section)
        self._status_bar.showMessage(
            f"{get_section_title(section)}: {len(instances)} panel(s)", 3000
        )

    # ------------------------------------------------------------------
    # Panels
    # ------------------------------------------------------------------

    def _set_panel_visible(self, panel_id: str, visible: bool) -> None:
        if visible:
            self._workspace.show_panel(panel_id)
        else:
            self._workspace.hide_panel(panel_id)
        if panel_id == CHARACTER_EDITOR_PANEL:
            self._workspace.characters.relayout()

    def _on_panel_visibility_changed(self, panel_id: str, visible: bool) -> None:
        action = self._panel_actions.get(panel_id)
        if action is not None:
            action.setChecked(visible)
        if panel_id == CHARACTER_EDITOR_PANEL:
            self._editor_action.setChecked(visible)

    def set_editor_visible(self, visible: bool) -> None:
        """Open or close the character editor and re-split the section."""
        if visible:
            self._workspace.characters.show_editor()
        else:
            self._workspace.characters.hide_editor()

    def set_character_view(self, mode: ViewMode | str) -> None:
        self._workspace.characters.set_view_mode(mode)
        current = self._workspace.characters.view_mode
        self._view_mode_actions[current].setChecked(True)
        self._bus.character_view_changed.emit(current.value)

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def _apply_container_size(self) -> None:
        self._workspace.set_container_size(self._canvas.width(), self._canvas.height())

    # ------------------------------------------------------------------
    # Window geometry
    # ------------------------------------------------------------------

    def _save_geometry(self) -> None:
        self._settings.setValue("geometry", self.saveGeometry())

    def _restore_geometry(self) -> None:
        geometry = self._settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_status_message(self, message: str) -> None:
        self._status_bar.showMessage(message, 5000)

    def _on_error(self, message: str) -> None:
        self._status_bar.showMessage(f"Error: {message}", 10000)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def closeEvent(self, event: QCloseEvent) -> None:
        """Save the current section's layout and window geometry on close."""
        self._resize_timer.stop()
        self._workspace.save_project_state()
        self._save_geometry()
        self._canvas.detach()
        logger.info("Main window closing, layout saved")
        super().closeEvent(event)
