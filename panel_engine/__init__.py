"""
Writers Desk panel layout engine.

Qt-free model of freeform panel layouts per section:

    templates       default panels per section
    geometry_store  live panels, visibility, snapshot/restore
    drag            pointer-driven repositioning with clamping
    split_layout    adaptive list/editor split (characters section)
    setup_flow      one-time setup and saved-layout reconciliation
    models          persisted state (pydantic)
    persistence     JSON state file
    workspace       section coordinator
"""
