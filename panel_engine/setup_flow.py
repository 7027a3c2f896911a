"""
panel_engine/setup_flow.py -- First-visit setup and layout reconciliation per section.

Decides which panels a section gets when it is entered:

* A saved, non-empty layout is used verbatim (template ignored).
* An unconfigured section with no saved layout runs the one-time setup:
  a selector (the setup dialog in the desktop shell) picks a subset of the
  template, all panels pre-selected.  The choice is recorded and stored as
  the section's saved layout straight away.
* A configured section whose saved layout went missing (the process died
  before the first snapshot was written) falls back to the template
  filtered by the recorded selection, at template default geometry.

Setup runs at most once per section; there is no way back to the
unconfigured state short of wiping the state file.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Sequence

from panel_engine.models import PanelSnapshot, SavedState
from panel_engine.templates import PanelConfig, get_template

logger = logging.getLogger(__name__)

# (section, template panels) -> ids the user kept
PanelSelector = Callable[[str, Sequence[PanelConfig]], Sequence[str]]


class SetupStatus(Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"


class ReconcileSource(Enum):
    SAVED_LAYOUT = "saved_layout"
    SETUP = "setup"
    SELECTION_FALLBACK = "selection_fallback"
    NONE = "none"


def snapshot_to_config(snap: PanelSnapshot) -> PanelConfig:
    return PanelConfig(
        id=snap.id,
        title=snap.title,
        x=snap.x,
        y=snap.y,
        width=snap.width,
        height=snap.height,
        hidden=snap.hidden,
    )


def config_to_snapshot(config: PanelConfig) -> PanelSnapshot:
    return PanelSnapshot(
        id=config.id,
        title=config.title,
        x=config.x,
        y=config.y,
        width=config.width,
        height=config.height,
        hidden=config.hidden,
    )


def select_all(section: str, panels: Sequence[PanelConfig]) -> list[str]:
    """Selector that keeps every template panel."""
    return [p.id for p in panels]


class SectionSetupFlow:
    """Resolves the panel configuration list for a section.

    Parameters
    ----------
    state : SavedState
        The persisted state; setup results are written into it.
    template_lookup : callable, optional
        section -> template panels.  Defaults to the built-in registry.
    """

    def __init__(
        self,
        state: SavedState,
        template_lookup: Callable[[str], list[PanelConfig]] = get_template,
    ):
        self.state = state
        self._template_lookup = template_lookup

    def status(self, section: str) -> SetupStatus:
        if self.state.is_configured(section) or self.state.layout_for(section):
            return SetupStatus.CONFIGURED
        return SetupStatus.UNCONFIGURED

    def needs_setup(self, section: str) -> bool:
        return self.status(section) is SetupStatus.UNCONFIGURED and bool(
            self._template_lookup(section)
        )

    def resolve(
        self, section: str, selector: PanelSelector = select_all
    ) -> tuple[list[PanelConfig], ReconcileSource]:
        """Return the panels to create for *section* and where they came from."""
        saved = self.state.layout_for(section)
        if saved:
            if not self.state.is_configured(section):
                self.state.setup_sections[section] = True
            logger.info("Loading saved layout for section %s", section)
            return [snapshot_to_config(s) for s in saved], ReconcileSource.SAVED_LAYOUT

        template = self._template_lookup(section)
        if not template:
            logger.debug("Section %s has no template", section)
            return [], ReconcileSource.NONE

        if not self.state.is_configured(section):
            return self._run_setup(section, template, selector), ReconcileSource.SETUP

        selected = set(self.state.selection_for(section))
        configs = [p for p in template if p.id in selected]
        logger.info(
            "Saved layout for %s missing, rebuilt %d panel(s) from selection",
            section, len(configs),
        )
        return configs, ReconcileSource.SELECTION_FALLBACK

    def _run_setup(
        self, section: str, template: list[PanelConfig], selector: PanelSelector
    ) -> list[PanelConfig]:
        logger.info("First visit to section %s, running setup", section)
        chosen = set(selector(section, list(template)))
        configs = [p for p in template if p.id in chosen]

        self.state.setup_sections[section] = True
        self.state.section_panel_selections[section] = [p.id for p in configs]
        self.state.panel_layouts[section] = [config_to_snapshot(p) for p in configs]
        logger.info("Setup complete for section %s: %s", section, [p.id for p in configs])
        return configs
