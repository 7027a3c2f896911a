"""
panel_engine/templates.py -- Built-in default panel layouts per section.

Each section of the application (Writing, Characters, ...) has a template:
the panels that appear the first time the section is opened and where
they sit.  Templates are immutable; callers receive the frozen
``PanelConfig`` records and create live instances from them.

Usage::

    from panel_engine.templates import get_template

    for config in get_template("writing"):
        store.create_panel(config)
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PanelConfig:
    """Identity and default placement of a panel."""

    id: str
    title: str
    x: int = 0
    y: int = 0
    width: int = 300
    height: int = 200
    hidden: bool = False

    def with_geometry(self, x: int, y: int, width: int, height: int) -> PanelConfig:
        return replace(self, x=x, y=y, width=width, height=height)


@dataclass(frozen=True)
class SectionTemplate:
    """A section's display name and its default panel set."""

    name: str
    panels: tuple[PanelConfig, ...]


# Panel ids used by the characters section split layout
CHARACTER_LIST_PANEL = "character-list"
CHARACTER_EDITOR_PANEL = "character-editor"


_TEMPLATES: dict[str, SectionTemplate] = {
    "writing": SectionTemplate(
        name="Writing",
        panels=(
            PanelConfig("editor", "Editor", 0, 0, 800, 600),
            PanelConfig("character-panel", "Characters", 810, 0, 350, 280),
            PanelConfig("world-panel", "World Notes", 810, 290, 350, 310),
        ),
    ),
    "plotting": SectionTemplate(
        name="Plotting",
        panels=(
            PanelConfig("plot-board", "Plot Board", 0, 0, 900, 600),
            PanelConfig("story-elements", "Story Elements", 910, 0, 250, 600),
        ),
    ),
    "characters": SectionTemplate(
        name="Characters",
        panels=(
            PanelConfig(CHARACTER_LIST_PANEL, "Character List", 0, 0, 1200, 600),
            PanelConfig(
                CHARACTER_EDITOR_PANEL, "Character Details", 910, 0, 500, 600, hidden=True
            ),
        ),
    ),
    "worldbuilding": SectionTemplate(
        name="World Building",
        panels=(
            PanelConfig("world-tree", "World Structure", 0, 0, 250, 600),
            PanelConfig("world-editor", "World Details", 260, 0, 900, 600),
        ),
    ),
    "research": SectionTemplate(
        name="Research",
        panels=(
            PanelConfig("research-list", "Research Items", 0, 0, 400, 600),
            PanelConfig("research-viewer", "Research Details", 410, 0, 750, 600),
        ),
    ),
}

# Navigation order
SECTION_NAMES: tuple[str, ...] = tuple(_TEMPLATES)


def get_template(section: str) -> list[PanelConfig]:
    """Return the default panels for *section* (empty list if unknown)."""
    template = _TEMPLATES.get(section)
    if template is None:
        return []
    return list(template.panels)


def get_section_title(section: str) -> str:
    """Return the display name of *section*, or the raw name if unknown."""
    template = _TEMPLATES.get(section)
    return template.name if template else section
