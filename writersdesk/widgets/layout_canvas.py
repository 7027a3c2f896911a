"""
writersdesk/widgets/layout_canvas.py -- Container widget for freeform panels.

Mirrors a ``SectionWorkspace``'s geometry store as ``PanelFrame`` children:
a frame is created when a panel is added, moved/resized/restacked when its
geometry changes and deleted when the panel is removed.  The store stays
the source of truth; the canvas never reads geometry back from widgets.

Pointer handling: the canvas installs a single application-level event
filter.  A left press on a panel header starts a drag in the workspace's
``DragController``; every subsequent move and the final release (anywhere
on screen) are forwarded to the same controller, which knows which panel
is being dragged.  Call ``detach()`` before discarding the canvas.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QEvent, QObject, QPoint, Qt, Signal
from PySide6.QtGui import QMouseEvent, QResizeEvent
from PySide6.QtWidgets import QApplication, QWidget

from panel_engine.geometry_store import PanelInstance
from panel_engine.workspace import SectionWorkspace
from writersdesk.services.event_bus import EventBus
from writersdesk.widgets.panel_frame import HEADER_OBJECT_NAME, PanelFrame

logger = logging.getLogger(__name__)


class LayoutCanvas(QWidget):
    """Renders the workspace's panels and routes drag gestures.

    Signals
    -------
    resized(int, int)
        Emitted on every resize with the new width and height.
    """

    resized = Signal(int, int)

    def __init__(self, workspace: SectionWorkspace, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("layoutCanvas")
        self.setMinimumSize(400, 300)
        self._workspace = workspace
        self._bus = EventBus.instance()
        self._frames: dict[str, PanelFrame] = {}
        self._filter_installed = False

        workspace.store.add_listener(self)
        for instance in workspace.store:
            self.panel_added(instance)

        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)
            self._filter_installed = True

    def detach(self) -> None:
        """Stop listening to the store and to application pointer events."""
        self._workspace.store.remove_listener(self)
        if self._filter_installed:
            app = QApplication.instance()
            if app is not None:
                app.removeEventFilter(self)
            self._filter_installed = False

    # ------------------------------------------------------------------
    # Frame access
    # ------------------------------------------------------------------

    def frame(self, panel_id: str) -> PanelFrame | None:
        return self._frames.get(panel_id)

    def frame_ids(self) -> list[str]:
        return list(self._frames)

    # ------------------------------------------------------------------
    # Store listener
    # ------------------------------------------------------------------

    def panel_added(self, instance: PanelInstance) -> None:
        frame = PanelFrame(instance.id, instance.title, self)
        frame.close_requested.connect(self._on_close_requested)
        instance.handle = frame
        self._frames[instance.id] = frame
        frame.setGeometry(*instance.geometry.as_tuple())
        frame.setVisible(instance.visible)
        self._restack()

    def panel_removed(self, instance: PanelInstance) -> None:
        frame = self._frames.pop(instance.id, None)
        if frame is None:
            return
        frame.hide()
        frame.deleteLater()
        instance.handle = None

    def geometry_changed(self, instance: PanelInstance) -> None:
        frame = self._frames.get(instance.id)
        if frame is None:
            return
        frame.setGeometry(*instance.geometry.as_tuple())
        self._restack()

    def visibility_changed(self, instance: PanelInstance) -> None:
        frame = self._frames.get(instance.id)
        if frame is None:
            return
        frame.setVisible(instance.visible)
        self._bus.panel_visibility_changed.emit(instance.id, instance.visible)

    def _restack(self) -> None:
        ordered = sorted(self._workspace.store, key=lambda inst: inst.z_order)
        for instance in ordered:
            frame = self._frames.get(instance.id)
            if frame is not None:
                frame.raise_()

    def _on_close_requested(self, panel_id: str) -> None:
        self._workspace.close_panel(panel_id)

    # ------------------------------------------------------------------
    # Pointer dispatch
    # ------------------------------------------------------------------

    def _to_canvas(self, event: QMouseEvent) -> QPoint:
        return self.mapFromGlobal(event.globalPosition().toPoint())

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        etype = event.type()
        drag = self._workspace.drag

        if etype == QEvent.Type.MouseButtonPress:
            if (
                isinstance(obj, QWidget)
                and obj.objectName() == HEADER_OBJECT_NAME
                and event.button() == Qt.MouseButton.LeftButton
            ):
                panel_id = obj.property("panel_id")
                if panel_id in self._frames:
                    pos = self._to_canvas(event)
                    if drag.begin(panel_id, pos.x(), pos.y()):
                        self._frames[panel_id].set_dragging(True)
        elif etype == QEvent.Type.MouseMove:
            if drag.is_dragging:
                pos = self._to_canvas(event)
                drag.move(pos.x(), pos.y())
        elif etype == QEvent.Type.MouseButtonRelease:
            session = drag.session
            if session is not None:
                frame = self._frames.get(session.panel_id)
                if frame is not None:
                    frame.set_dragging(False)
                drag.end()

        return super().eventFilter(obj, event)

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        size = event.size()
        self._workspace.store.set_container_size(size.width(), size.height())
        self.resized.emit(size.width(), size.height())
