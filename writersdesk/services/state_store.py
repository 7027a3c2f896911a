"""
writersdesk/services/state_store.py -- Reactive store wrapping layoutState.json.

Holds the layout state in memory, hands copies to the layout engine and
writes changes back through ``LayoutStateFile``.  Qt signals are emitted
on every load and save.  The store is the persistence collaborator of the
``SectionWorkspace``: ``load_state()`` is called once at startup and
``save_state()`` after every layout-affecting change.

Saves never raise.  A failed write is logged by the state file, the
store stays dirty and the auto-save timer retries it.

Usage::

    from writersdesk.services.state_store import StateStore

    store = StateStore.instance(state_dir)
    workspace = SectionWorkspace(store)
    workspace.load()
"""

from __future__ import annotations

import logging
import threading

from PySide6.QtCore import QObject, QTimer, Signal

from panel_engine.models import SavedState
from panel_engine.persistence import LayoutStateFile

logger = logging.getLogger(__name__)

AUTO_SAVE_INTERVAL_MS = 30_000


class StateStore(QObject):
    """Reactive wrapper around layoutState.json.

    Signals
    -------
    state_saved()
        Emitted after the state file is successfully written to disk.
    state_loaded()
        Emitted after the state file is loaded/reloaded from disk.
    layouts_changed()
        Emitted when the engine hands over a new state.
    """

    state_saved = Signal()
    state_loaded = Signal()
    layouts_changed = Signal()

    _instance: StateStore | None = None
    _singleton_lock = threading.Lock()

    def __init__(self, state_dir: str, parent: QObject | None = None):
        super().__init__(parent)
        self._file = LayoutStateFile(state_dir)
        self._lock = threading.RLock()
        self._dirty = False

        # None until something was loaded or saved
        self._state: SavedState | None = self._file.load_state()

        # Auto-save timer (every 30 seconds if dirty)
        self._auto_save_timer = QTimer(self)
        self._auto_save_timer.setInterval(AUTO_SAVE_INTERVAL_MS)
        self._auto_save_timer.timeout.connect(self._auto_save)
        self._auto_save_timer.start()

    @classmethod
    def instance(cls, state_dir: str = "") -> StateStore:
        """Return the singleton StateStore instance."""
        if cls._instance is None:
            with cls._singleton_lock:
                if cls._instance is None:
                    if not state_dir:
                        raise RuntimeError("StateStore.instance() requires state_dir on first call.")
                    cls._instance = cls(state_dir)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._singleton_lock:
            if cls._instance is not None:
                cls._instance._auto_save_timer.stop()
                cls._instance.deleteLater()
            cls._instance = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        return str(self._file.path)

    @property
    def is_dirty(self) -> bool:
        with self._lock:
            return self._dirty

    @property
    def has_state(self) -> bool:
        with self._lock:
            return self._state is not None

    def configured_sections(self) -> list[str]:
        with self._lock:
            if self._state is None:
                return []
            return [s for s, done in self._state.setup_sections.items() if done]

    # ------------------------------------------------------------------
    # Persistence collaborator interface
    # ------------------------------------------------------------------

    def load_state(self) -> SavedState | None:
        """Return a copy of the in-memory state (None on a fresh start)."""
        with self._lock:
            if self._state is None:
                return None
            return self._state.model_copy(deep=True)

    def save_state(self, state: SavedState) -> None:
        """Take over *state* and write it to disk right away."""
        with self._lock:
            self._state = state.model_copy(deep=True)
            self._dirty = True
        self.layouts_changed.emit()
        self.save()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Write current state to disk immediately."""
        with self._lock:
            if self._state is None:
                return False
            data = self._state.model_copy(deep=True)
            self._dirty = False

        if self._file.save_state(data):
            self.state_saved.emit()
            return True
        with self._lock:
            self._dirty = True  # Retry next auto-save
        return False

    def reload(self) -> None:
        """Re-read the state file from disk (discarding in-memory changes)."""
        with self._lock:
            self._state = self._file.load_state()
            self._dirty = False
        self.state_loaded.emit()

    def _auto_save(self) -> None:
        """Called by the auto-save timer. Only writes if dirty."""
        if self._dirty:
            self.save()

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Stop auto-save and write the in-memory state one last time."""
        self._auto_save_timer.stop()
        if self.has_state:
            self.save()
