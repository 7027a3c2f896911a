"""
Writers Desk -- PySide6 Desktop Application.

Package layout:
    widgets/    Layout canvas, floating panel frames, setup dialog
    services/   Application services (event bus, state store)
    theme/      Dark theme and custom stylesheets

The panel layout model itself lives in the Qt-free ``panel_engine``
package.
"""
