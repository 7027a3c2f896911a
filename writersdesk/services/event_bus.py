"""
writersdesk/services/event_bus.py -- Application-wide event bus using Qt signals.

Singleton that provides typed signals for cross-widget communication.
The main window, the layout canvas and the state store connect to the
EventBus rather than directly to each other.

Usage::

    from writersdesk.services.event_bus import EventBus

    bus = EventBus.instance()
    bus.section_changed.connect(my_handler)
    bus.section_changed.emit("characters")
"""

from __future__ import annotations

import threading

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """Application-wide signal bus.

    Signals
    -------
    section_changed(str)
        Fired after a section's panels have been mounted. Payload is the
        section name.
    layout_saved(str)
        Fired after a section's layout snapshot was handed to the store.
    panel_visibility_changed(str, bool)
        Fired when a panel is shown or hidden. Payload is panel id and the
        new visibility.
    character_view_changed(str)
        Fired when the characters section switches between list, card and
        importance views.
    error_occurred(str)
        Fired when an error needs to be shown to the user.
    status_message(str)
        Fired to update the status bar message.
    """

    # Layout
    section_changed = Signal(str)
    layout_saved = Signal(str)
    panel_visibility_changed = Signal(str, bool)

    # Characters section
    character_view_changed = Signal(str)

    # Error and status
    error_occurred = Signal(str)
    status_message = Signal(str)

    # Singleton
    _instance: EventBus | None = None
    _lock = threading.Lock()

    @classmethod
    def instance(cls) -> EventBus:
        """Return the singleton EventBus instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.deleteLater()
            cls._instance = None
