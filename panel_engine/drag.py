"""
panel_engine/drag.py -- Pointer-driven panel dragging.

A ``DragController`` turns a pointer-down on a panel header, the following
pointer moves and the final pointer-up into clamped repositioning of that
panel inside its container.  The controller owns a single session slot:
while a drag is active, further pointer-downs are ignored.

The rendering layer registers one move/up listener pair per container and
forwards every event to the controller; the controller dispatches to the
panel of the active session.  Pointer coordinates are always container
coordinates.

State machine::

    Idle --begin()--> Dragging --move()*--> Dragging --end()--> Idle
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from panel_engine.geometry_store import PanelGeometryStore, clamp

logger = logging.getLogger(__name__)


@dataclass
class DragSession:
    """The panel being dragged and where on it the pointer grabbed it."""

    panel_id: str
    offset_x: int
    offset_y: int


class DragController:
    """Moves one panel at a time in response to pointer events.

    Parameters
    ----------
    store : PanelGeometryStore
        The store whose panels are dragged.
    container_size : callable
        Returns the current ``(width, height)`` of the container.  Queried on
        every move so window resizes mid-drag are honoured.
    on_drag_finished : callable, optional
        Called with the panel id after every completed drag, after the
        panel's own completion callback.
    """

    def __init__(
        self,
        store: PanelGeometryStore,
        container_size: Callable[[], tuple[int, int]],
        on_drag_finished: Callable[[str], None] | None = None,
    ):
        self._store = store
        self._container_size = container_size
        self._on_drag_finished = on_drag_finished
        self._session: DragSession | None = None

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    def begin(self, panel_id: str, pointer_x: int, pointer_y: int) -> bool:
        """Start dragging *panel_id*.  Returns False if nothing started."""
        if self._session is not None:
            logger.debug(
                "Ignoring drag start on %s: %s is already being dragged",
                panel_id, self._session.panel_id,
            )
            return False
        instance = self._store.get(panel_id)
        if instance is None or not instance.visible:
            return False

        g = instance.geometry
        self._session = DragSession(panel_id, int(pointer_x) - g.x, int(pointer_y) - g.y)
        self._store.raise_panel(panel_id)
        return True

    def move(self, pointer_x: int, pointer_y: int) -> bool:
        """Reposition the dragged panel under the pointer, clamped to the container."""
        session = self._session
        if session is None:
            return False
        instance = self._store.get(session.panel_id)
        if instance is None:
            # Panel was removed mid-drag
            self._session = None
            return False

        width, height = self._container_size()
        g = instance.geometry
        x = clamp(int(pointer_x) - session.offset_x, 0, width - g.width)
        y = clamp(int(pointer_y) - session.offset_y, 0, height - g.height)
        self._store.move(session.panel_id, x, y)
        return True

    def end(self) -> bool:
        """Finish the active drag and fire the completion callbacks."""
        session = self._session
        if session is None:
            return False
        self._session = None

        instance = self._store.get(session.panel_id)
        if instance is not None and instance.on_drag_end is not None:
            instance.on_drag_end()
        if self._on_drag_finished is not None:
            self._on_drag_finished(session.panel_id)
        return True
