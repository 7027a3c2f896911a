"""
Shared pytest fixtures for the Writers Desk test suite.

Provides:
    - abc_template / abcd_template: small section templates for setup tests
    - template_lookup: factory turning a template list into a lookup callable
    - saved_state_dict: a realistic layoutState.json payload
    - state_dir: a temporary directory holding a layoutState.json
"""

import json
import os
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure packages are importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from panel_engine.templates import PanelConfig  # noqa: E402


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def abc_template():
    """Three-panel template: a, b, c side by side."""
    return [
        PanelConfig("a", "Panel A", 0, 0, 300, 400),
        PanelConfig("b", "Panel B", 310, 0, 300, 400),
        PanelConfig("c", "Panel C", 620, 0, 300, 400),
    ]


@pytest.fixture
def abcd_template(abc_template):
    """The abc template plus a fourth panel d."""
    return abc_template + [PanelConfig("d", "Panel D", 0, 410, 920, 180)]


@pytest.fixture
def template_lookup():
    """Return a factory: template_lookup({"x": [...]}) -> section lookup callable."""
    def _factory(templates):
        return lambda section: list(templates.get(section, []))
    return _factory


@pytest.fixture
def saved_state_dict():
    """Return a layoutState.json payload with one configured section."""
    return {
        "panelLayouts": {
            "writing": [
                {"id": "editor", "title": "Editor", "x": 20, "y": 30, "width": 700, "height": 500},
                {"id": "world-panel", "title": "World Notes", "x": 730, "y": 30,
                 "width": 350, "height": 310},
            ],
        },
        "setupSections": {"writing": True},
        "sectionPanelSelections": {"writing": ["editor", "world-panel"]},
        "projects": [
            {"id": "project_1", "name": "The Long Night", "enabledSections": ["writing"]},
        ],
    }


@pytest.fixture
def state_dir(tmp_path, saved_state_dict):
    """Create a state directory with layoutState.json and return its path."""
    root = tmp_path / "state"
    root.mkdir()
    with open(str(root / "layoutState.json"), "w", encoding="utf-8") as fh:
        json.dump(saved_state_dict, fh, indent=2)
    return str(root)
