"""
panel_engine/errors.py -- Exceptions raised by the layout engine.

Most layout operations are best-effort and report a missing panel through
``OpResult.NOT_FOUND`` instead of raising; only programming errors end up
here.
"""


class PanelEngineError(Exception):
    """Base class for layout engine errors."""


class DuplicatePanelError(PanelEngineError):
    """A panel with this id is already mounted in the store."""

    def __init__(self, panel_id: str):
        super().__init__(f"Panel '{panel_id}' already exists")
        self.panel_id = panel_id
