"""
panel_engine/workspace.py -- Section coordinator for the layout engine.

``SectionWorkspace`` ties the pieces together for one layout container:
it adopts the state loaded at startup, switches sections (clearing the
store, reconciling saved layout against the template, creating panels),
snapshots the store back into the saved state after every drag or setup,
and forwards container resizes to the clamp and split logic.

It holds no Qt objects; the desktop shell drives it from widget events.

Usage::

    workspace = SectionWorkspace(LayoutStateFile(state_dir))
    workspace.load()
    workspace.set_container_size(1200, 600)
    workspace.switch_section("writing", selector=dialog_selector)
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from panel_engine.drag import DragController
from panel_engine.geometry_store import (
    OpResult,
    PanelGeometry,
    PanelGeometryStore,
    PanelInstance,
    clamp_geometry,
)
from panel_engine.models import SavedState
from panel_engine.persistence import LayoutPersistence
from panel_engine.setup_flow import (
    PanelSelector,
    ReconcileSource,
    SectionSetupFlow,
    select_all,
)
from panel_engine.split_layout import CharacterSplitController, SplitResult
from panel_engine.templates import PanelConfig, get_template

logger = logging.getLogger(__name__)

CHARACTERS_SECTION = "characters"


class SectionWorkspace:
    """Panel layout of the active section, plus its persisted state.

    Parameters
    ----------
    persistence : LayoutPersistence, optional
        Where snapshots are saved.  Without one the workspace is purely
        in-memory.
    template_lookup : callable, optional
        section -> template panels (built-in registry by default).
    on_saved : callable, optional
        Called with the section name after every save request.
    """

    def __init__(
        self,
        persistence: LayoutPersistence | None = None,
        template_lookup: Callable[[str], list[PanelConfig]] = get_template,
        on_saved: Callable[[str], None] | None = None,
    ):
        self._persistence = persistence
        self._template_lookup = template_lookup
        self._on_saved = on_saved
        self.store = PanelGeometryStore()
        self.state = SavedState()
        self.setup = SectionSetupFlow(self.state, template_lookup)
        self.drag = DragController(self.store, self.container_size)
        self.characters = CharacterSplitController(self.store)
        self.current_section: str | None = None
        self.last_source: ReconcileSource = ReconcileSource.NONE

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def load(self, state: SavedState | None = None) -> SavedState:
        """Adopt *state*, or load it from the persistence collaborator.

        A missing or unreadable state means a fresh start.
        """
        if state is None and self._persistence is not None:
            state = self._persistence.load_state()
        self.state = state if state is not None else SavedState()
        self.setup = SectionSetupFlow(self.state, self._template_lookup)
        return self.state

    def save_project_state(self) -> SavedState | None:
        """Snapshot the current section and hand the state to persistence.

        An empty snapshot never overwrites a saved layout.
        """
        section = self.current_section
        if section is None:
            return None

        layout = self.store.snapshot()
        if layout:
            self.state.panel_layouts[section] = layout

        if self._persistence is not None:
            self._persistence.save_state(self.state)
        if self._on_saved is not None:
            self._on_saved(section)
        return self.state

    # ------------------------------------------------------------------
    # Container
    # ------------------------------------------------------------------

    def container_size(self) -> tuple[int, int]:
        return self.store.container_size or (0, 0)

    def set_container_size(self, width: int, height: int) -> SplitResult | None:
        """Record a new container size and pull panels back inside it."""
        self.store.clamp_all(width, height)
        if self.current_section == CHARACTERS_SECTION:
            return self.characters.relayout(width, height)
        return None

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def switch_section(
        self,
        section: str,
        selector: PanelSelector = select_all,
        container: Any = None,
    ) -> list[PanelInstance]:
        """Replace the mounted panels with those of *section*.

        Unknown sections are ignored and return an empty list.
        """
        if not self._template_lookup(section) and not self.state.layout_for(section):
            logger.warning("Unknown section %r", section)
            return []

        self.store.clear_all()
        self.current_section = section

        configs, source = self.setup.resolve(section, selector)
        self.last_source = source
        size = self.store.container_size
        if size is not None:
            configs = [self._fit_to_container(config, *size) for config in configs]
        instances = [
            self.store.create_panel(config, container, on_drag_end=self.save_project_state)
            for config in configs
        ]

        if size is not None and section == CHARACTERS_SECTION:
            self.characters.relayout(*size)

        logger.info(
            "Section %s loaded with %d panel(s) (%s)", section, len(instances), source.value
        )
        if instances:
            self.save_project_state()
        return instances

    @staticmethod
    def _fit_to_container(config: PanelConfig, width: int, height: int) -> PanelConfig:
        """Pull a config inside the container before any listener renders it."""
        fitted = clamp_geometry(
            PanelGeometry(config.x, config.y, config.width, config.height), width, height
        )
        if fitted.as_tuple() == (config.x, config.y, config.width, config.height):
            return config
        return config.with_geometry(*fitted.as_tuple())

    def needs_setup(self, section: str) -> bool:
        return self.setup.needs_setup(section)

    # ------------------------------------------------------------------
    # Panel visibility (cosmetic, not persisted on its own)
    # ------------------------------------------------------------------

    def show_panel(self, panel_id: str) -> OpResult:
        return self.store.show(panel_id)

    def hide_panel(self, panel_id: str) -> OpResult:
        return self.store.hide(panel_id)

    def toggle_panel(self, panel_id: str) -> OpResult:
        return self.store.toggle(panel_id)

    def close_panel(self, panel_id: str) -> OpResult:
        """Remove a panel from the current section (header close button)."""
        return self.store.remove_panel(panel_id)
