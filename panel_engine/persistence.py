"""
panel_engine/persistence.py -- JSON file backing for the layout state.

``LayoutStateFile`` is the persistence collaborator the workspace talks
to: ``load_state()`` once at startup, ``save_state()`` after every
layout-affecting change.  Disk problems never reach the caller.  A failed
load is treated as "no prior state" and a failed save is logged and
dropped; the state simply stays in memory until the next save works.

Writes go to a temporary file in the same directory followed by
``os.replace()`` so a crash mid-write never leaves a truncated file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from panel_engine.models import SavedState

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "layoutState.json"


class LayoutPersistence(Protocol):
    def load_state(self) -> SavedState | None: ...

    def save_state(self, state: SavedState) -> None: ...


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------

def read_json(path: str | Path) -> Any:
    """Parse the JSON file at *path*.

    Raises
    ------
    FileNotFoundError, OSError, json.JSONDecodeError
        Propagated to the caller, which decides what "unreadable" means.
    """
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def write_json_atomic(path: str | Path, data: Any, *, indent: int = 2) -> None:
    """Write *data* as JSON to *path* via temp file and ``os.replace()``.

    Parent directories are created as needed.
    """
    path = str(path)
    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=indent, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ---------------------------------------------------------------------------
# State file
# ---------------------------------------------------------------------------

class LayoutStateFile:
    """Reads and writes ``layoutState.json`` in a state directory."""

    def __init__(self, state_dir: str | Path):
        self._path = Path(state_dir) / STATE_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load_state(self) -> SavedState | None:
        """Return the saved state, or None when there is none or it is unreadable."""
        if not self.exists():
            logger.info("No layout state at %s yet", self._path)
            return None
        try:
            raw = read_json(self._path)
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to read layout state from %s", self._path)
            return None
        logger.info("Loaded layout state from %s", self._path)
        return SavedState.from_raw(raw)

    def save_state(self, state: SavedState) -> bool:
        """Write *state*; returns False (after logging) if the write failed."""
        try:
            write_json_atomic(self._path, state.to_dict())
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save layout state to %s", self._path)
            return False
        logger.debug("Layout state saved to %s", self._path)
        return True
