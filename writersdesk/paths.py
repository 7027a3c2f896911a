"""
writersdesk/paths.py -- Path resolution for frozen and development modes.

Detects PyInstaller bundles (sys._MEIPASS) and uses
platformdirs for the per-user directory holding the layout state file.
"""

from __future__ import annotations

import os
import sys

from platformdirs import user_data_dir

_APP_NAME = "WritersDesk"
_APP_AUTHOR = "WritersDesk"


def is_frozen() -> bool:
    """Return True if running from a PyInstaller bundle."""
    return getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS")


def get_state_dir() -> str:
    """Return the directory holding layoutState.json, creating it if needed.

    Lives under the user's home directory on every platform.
    """
    path = user_data_dir(_APP_NAME, _APP_AUTHOR)
    os.makedirs(path, exist_ok=True)
    return path
