"""
panel_engine/models.py -- Pydantic models for the persisted layout state.

The layout state file is written by older builds and edited by hand now
and then, so nothing in it is trusted.  Validators coerce wrong-shaped
fields to empty defaults and drop individual snapshot entries that cannot
be read, rather than rejecting the whole document.  Unknown top-level keys
(``projects`` and other data the layout engine does not interpret) are
carried through untouched.

Usage::

    from panel_engine.models import SavedState

    saved = SavedState.from_raw(json.load(fh))
    saved.panel_layouts["writing"]          # list[PanelSnapshot]
    json.dump(saved.to_dict(), fh)
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_serializer,
)

logger = logging.getLogger(__name__)

# Upper bound for stored coordinates; Qt geometry is 32-bit
MAX_COORDINATE = 100_000


class PanelSnapshot(BaseModel):
    """Geometry of one panel as read from the live store."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    title: str = ""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    hidden: bool = False

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("panel id must not be blank")
        return value

    @field_validator("x", "y", "width", "height", mode="before")
    @classmethod
    def _non_negative_int(cls, value: Any) -> int:
        if isinstance(value, bool):
            return 0
        try:
            return min(MAX_COORDINATE, max(0, int(value)))
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator("title", mode="before")
    @classmethod
    def _title_str(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("hidden", mode="before")
    @classmethod
    def _hidden_bool(cls, value: Any) -> bool:
        return value is True

    @model_serializer(mode="wrap")
    def _omit_visible_flag(self, handler):
        data = handler(self)
        if not self.hidden:
            data.pop("hidden", None)
        return data


class SavedState(BaseModel):
    """The whole persisted layout state file.

    Attributes map to the camelCase keys of the file:

    ``panelLayouts``
        section -> ordered list of panel snapshots.
    ``setupSections``
        section -> True once the one-time setup has completed.
    ``sectionPanelSelections``
        section -> panel ids chosen during setup.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    panel_layouts: dict[str, list[PanelSnapshot]] = Field(
        default_factory=dict, alias="panelLayouts"
    )
    setup_sections: dict[str, bool] = Field(default_factory=dict, alias="setupSections")
    section_panel_selections: dict[str, list[str]] = Field(
        default_factory=dict, alias="sectionPanelSelections"
    )

    @field_validator("panel_layouts", mode="before")
    @classmethod
    def _coerce_layouts(cls, value: Any) -> dict[str, list[Any]]:
        if not isinstance(value, dict):
            return {}
        layouts: dict[str, list[Any]] = {}
        for section, entries in value.items():
            if not isinstance(section, str) or not isinstance(entries, list):
                logger.debug("Dropping malformed layout for section %r", section)
                continue
            kept = []
            seen: set[str] = set()
            for entry in entries:
                if isinstance(entry, PanelSnapshot):
                    snap = entry
                else:
                    try:
                        snap = PanelSnapshot.model_validate(entry)
                    except ValidationError:
                        logger.debug("Dropping malformed panel entry in %s: %r", section, entry)
                        continue
                if snap.id in seen:
                    continue
                seen.add(snap.id)
                kept.append(snap)
            layouts[section] = kept
        return layouts

    @field_validator("setup_sections", mode="before")
    @classmethod
    def _coerce_setup(cls, value: Any) -> dict[str, bool]:
        if not isinstance(value, dict):
            return {}
        return {k: v is True for k, v in value.items() if isinstance(k, str)}

    @field_validator("section_panel_selections", mode="before")
    @classmethod
    def _coerce_selections(cls, value: Any) -> dict[str, list[str]]:
        if not isinstance(value, dict):
            return {}
        selections: dict[str, list[str]] = {}
        for section, ids in value.items():
            if not isinstance(section, str) or not isinstance(ids, list):
                continue
            selections[section] = [i for i in ids if isinstance(i, str)]
        return selections

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_raw(cls, data: Any) -> SavedState:
        """Build a SavedState from parsed JSON, falling back to empty state."""
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Layout state is not a JSON object, ignoring it")
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError:
            logger.warning("Layout state could not be read, starting fresh", exc_info=True)
            return cls()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    # ------------------------------------------------------------------
    # Per-section helpers
    # ------------------------------------------------------------------

    def layout_for(self, section: str) -> list[PanelSnapshot]:
        return list(self.panel_layouts.get(section, []))

    def is_configured(self, section: str) -> bool:
        return self.setup_sections.get(section, False)

    def selection_for(self, section: str) -> list[str]:
        return list(self.section_panel_selections.get(section, []))
