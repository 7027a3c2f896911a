"""
Tests for writersdesk/paths.py and writersdesk/theme/dark_theme.py.
"""

import os
import sys
from unittest.mock import patch

from PySide6.QtWidgets import QApplication

from writersdesk import paths
from writersdesk.theme.dark_theme import apply_theme


class TestPaths:
    def test_not_frozen_in_tests(self):
        assert not paths.is_frozen()

    def test_frozen_detection(self):
        with patch.object(sys, "frozen", True, create=True), \
                patch.object(sys, "_MEIPASS", "/bundle", create=True):
            assert paths.is_frozen()

    def test_state_dir_created(self, tmp_path):
        target = tmp_path / "data" / "WritersDesk"
        with patch.object(paths, "user_data_dir", return_value=str(target)):
            result = paths.get_state_dir()
        assert result == str(target)
        assert os.path.isdir(result)


class TestTheme:
    def test_panel_overrides_appended(self, qtbot):
        app = QApplication.instance()
        original = app.styleSheet()
        try:
            apply_theme(app)
            assert "QFrame#panelFrame" in app.styleSheet()
        finally:
            app.setStyleSheet(original)

    def test_falls_back_when_material_fails(self, qtbot):
        app = QApplication.instance()
        original = app.styleSheet()
        try:
            with patch("qt_material.apply_stylesheet", side_effect=RuntimeError("boom")), \
                    patch("PySide6.QtWidgets.QApplication") as qapp_cls:
                apply_theme(app)
            qapp_cls.setStyle.assert_called_once_with("Fusion")
            assert "QWidget#panelHeader" in app.styleSheet()
        finally:
            app.setStyleSheet(original)
