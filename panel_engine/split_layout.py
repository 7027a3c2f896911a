"""
panel_engine/split_layout.py -- Adaptive list/editor split for the characters section.

The characters section shows a list (or card grid, or importance groups)
next to an optional editor.  When the editor is open the container width
is split so the editor never gets narrower than ``MIN_EDITOR_WIDTH`` and
never takes more than 70% (65% in the importance view, whose grouped
cards need more room) of the width.  When the editor is closed the list
fills the whole container.

Usage::

    from panel_engine.split_layout import SplitLayoutParams, ViewMode, compute_split

    result = compute_split(SplitLayoutParams(1200, 600, ViewMode.LIST, True))
    result.list_width, result.editor_width      # (350, 840)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from panel_engine.geometry_store import PanelGeometry, PanelGeometryStore, clamp
from panel_engine.templates import CHARACTER_EDITOR_PANEL, CHARACTER_LIST_PANEL

logger = logging.getLogger(__name__)

MIN_EDITOR_WIDTH = 320
MIN_LIST_WIDTH = 280
SPLIT_GAP = 10
MAX_EDITOR_FRACTION = 0.70
MAX_EDITOR_FRACTION_IMPORTANCE = 0.65


class ViewMode(Enum):
    LIST = "list"
    CARD = "card"
    IMPORTANCE = "importance"

    @classmethod
    def parse(cls, value: str | ViewMode) -> ViewMode:
        """Return the matching mode, defaulting to LIST for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.LIST


@dataclass(frozen=True)
class SplitLayoutParams:
    container_width: int
    container_height: int
    view_mode: ViewMode = ViewMode.LIST
    editor_visible: bool = False


@dataclass(frozen=True)
class SplitResult:
    list_geometry: PanelGeometry
    editor_geometry: PanelGeometry | None

    @property
    def list_width(self) -> int:
        return self.list_geometry.width

    @property
    def editor_width(self) -> int:
        return self.editor_geometry.width if self.editor_geometry else 0


def max_editor_fraction(view_mode: ViewMode) -> float:
    if view_mode is ViewMode.IMPORTANCE:
        return MAX_EDITOR_FRACTION_IMPORTANCE
    return MAX_EDITOR_FRACTION


def compute_split(params: SplitLayoutParams) -> SplitResult:
    """Compute list and editor geometry for the given container.

    ``editor_geometry`` is None when the editor is hidden; the editor
    panel is then left untouched.
    """
    width = max(0, params.container_width)
    height = max(0, params.container_height)

    if not params.editor_visible:
        return SplitResult(PanelGeometry(0, 0, width, height), None)

    fraction = max_editor_fraction(params.view_mode)
    list_width = math.floor(width * (1 - fraction))
    editor_width = width - list_width - SPLIT_GAP

    editor_width = clamp(editor_width, MIN_EDITOR_WIDTH, math.floor(width * fraction))
    list_width = clamp(width - editor_width - SPLIT_GAP, MIN_LIST_WIDTH, width)

    return SplitResult(
        PanelGeometry(0, 0, list_width, height),
        PanelGeometry(list_width + SPLIT_GAP, 0, editor_width, height),
    )


def apply_split(
    store: PanelGeometryStore,
    params: SplitLayoutParams,
    list_panel: str = CHARACTER_LIST_PANEL,
    editor_panel: str = CHARACTER_EDITOR_PANEL,
) -> SplitResult:
    """Compute the split and write it into *store*."""
    result = compute_split(params)
    store.set_geometry(list_panel, *result.list_geometry.as_tuple())
    if result.editor_geometry is not None:
        store.set_geometry(editor_panel, *result.editor_geometry.as_tuple())
    logger.debug(
        "Split layout (%s, editor=%s): list=%d editor=%d",
        params.view_mode.value, params.editor_visible,
        result.list_width, result.editor_width,
    )
    return result


class CharacterSplitController:
    """Keeps the characters section split in step with view and editor state.

    Re-applies the split whenever the editor is shown or hidden, the view
    mode changes, or ``relayout()`` is called with a new container size.
    """

    def __init__(
        self,
        store: PanelGeometryStore,
        view_mode: ViewMode = ViewMode.LIST,
        list_panel: str = CHARACTER_LIST_PANEL,
        editor_panel: str = CHARACTER_EDITOR_PANEL,
    ):
        self._store = store
        self._view_mode = view_mode
        self._list_panel = list_panel
        self._editor_panel = editor_panel
        self._size: tuple[int, int] = (0, 0)

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def editor_visible(self) -> bool:
        return self._store.is_visible(self._editor_panel)

    @property
    def active(self) -> bool:
        """True when the list panel is mounted in the store."""
        return self._list_panel in self._store

    def params(self) -> SplitLayoutParams:
        return SplitLayoutParams(self._size[0], self._size[1], self._view_mode, self.editor_visible)

    def relayout(self, width: int | None = None, height: int | None = None) -> SplitResult | None:
        if width is not None and height is not None:
            self._size = (int(width), int(height))
        if not self.active:
            return None
        return apply_split(self._store, self.params(), self._list_panel, self._editor_panel)

    def show_editor(self) -> SplitResult | None:
        self._store.show(self._editor_panel)
        return self.relayout()

    def hide_editor(self) -> SplitResult | None:
        self._store.hide(self._editor_panel)
        return self.relayout()

    def set_view_mode(self, mode: ViewMode | str) -> SplitResult | None:
        self._view_mode = ViewMode.parse(mode)
        return self.relayout()
