"""
Tests for panel_engine/setup_flow.py -- first-visit setup, saved layout
reuse and the selection fallback.
"""

from unittest.mock import MagicMock

from panel_engine.models import PanelSnapshot, SavedState
from panel_engine.setup_flow import (
    ReconcileSource,
    SectionSetupFlow,
    SetupStatus,
    select_all,
)
from panel_engine.templates import PanelConfig


def _deselect(*dropped):
    def _selector(section, panels):
        return [p.id for p in panels if p.id not in dropped]
    return _selector


class TestFirstVisit:
    def test_unconfigured_section_runs_selector(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        selector = MagicMock(side_effect=select_all)

        assert flow.status("x") is SetupStatus.UNCONFIGURED
        configs, source = flow.resolve("x", selector)

        selector.assert_called_once()
        section, offered = selector.call_args.args
        assert section == "x"
        assert [p.id for p in offered] == ["a", "b", "c"]
        assert source is ReconcileSource.SETUP
        assert [c.id for c in configs] == ["a", "b", "c"]

    def test_deselecting_b_saves_a_and_c(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        configs, _ = flow.resolve("x", _deselect("b"))

        assert [c.id for c in configs] == ["a", "c"]
        assert state.setup_sections["x"] is True
        assert state.section_panel_selections["x"] == ["a", "c"]
        assert {s.id for s in state.panel_layouts["x"]} == {"a", "c"}
        assert flow.status("x") is SetupStatus.CONFIGURED

    def test_setup_result_uses_template_geometry(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        configs, _ = flow.resolve("x", _deselect("a"))
        assert configs[0] == abc_template[1]
        assert state.panel_layouts["x"][0].x == 310

    def test_selection_order_follows_template(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        configs, _ = flow.resolve("x", lambda s, p: ["c", "a"])
        assert [c.id for c in configs] == ["a", "c"]

    def test_unknown_ids_from_selector_ignored(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        configs, _ = flow.resolve("x", lambda s, p: ["a", "zzz"])
        assert [c.id for c in configs] == ["a"]

    def test_empty_selection_allowed(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        configs, _ = flow.resolve("x", lambda s, p: [])
        assert configs == []
        assert state.setup_sections["x"] is True

        # Setup does not run again
        selector = MagicMock(return_value=["a"])
        configs, source = flow.resolve("x", selector)
        selector.assert_not_called()
        assert configs == []
        assert source is ReconcileSource.SELECTION_FALLBACK

    def test_hidden_flag_survives_setup(self, template_lookup):
        template = [PanelConfig("list", "List"), PanelConfig("editor", "Editor", hidden=True)]
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": template}))
        flow.resolve("x")
        assert state.panel_layouts["x"][1].hidden is True

    def test_section_without_template(self, template_lookup):
        flow = SectionSetupFlow(SavedState(), template_lookup({}))
        selector = MagicMock()
        configs, source = flow.resolve("nowhere", selector)
        assert configs == []
        assert source is ReconcileSource.NONE
        selector.assert_not_called()
        assert flow.needs_setup("nowhere") is False


class TestRepeatVisit:
    def test_saved_layout_used_verbatim(self, abc_template, template_lookup):
        state = SavedState()
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        flow.resolve("x", _deselect("b"))

        # Template changes between visits
        changed = [PanelConfig("a", "Renamed", 999, 999, 10, 10), PanelConfig("e", "E")]
        flow = SectionSetupFlow(state, template_lookup({"x": changed}))
        selector = MagicMock()
        configs, source = flow.resolve("x", selector)

        selector.assert_not_called()
        assert source is ReconcileSource.SAVED_LAYOUT
        assert [c.id for c in configs] == ["a", "c"]
        assert configs[0].x == 0
        assert configs[0].title == "Panel A"

    def test_saved_layout_marks_section_configured(self, abc_template, template_lookup):
        state = SavedState(panel_layouts={"x": [PanelSnapshot(id="a", width=5, height=5)]})
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        flow.resolve("x", MagicMock())
        assert state.setup_sections["x"] is True

    def test_saved_layout_without_template(self, template_lookup):
        state = SavedState(panel_layouts={"custom": [PanelSnapshot(id="q", title="Q")]})
        flow = SectionSetupFlow(state, template_lookup({}))
        configs, source = flow.resolve("custom")
        assert [c.id for c in configs] == ["q"]
        assert source is ReconcileSource.SAVED_LAYOUT


class TestSelectionFallback:
    def test_configured_without_layout_uses_selection(self, abcd_template, template_lookup):
        state = SavedState(
            setup_sections={"x": True},
            section_panel_selections={"x": ["a", "c"]},
        )
        flow = SectionSetupFlow(state, template_lookup({"x": abcd_template}))
        selector = MagicMock()
        configs, source = flow.resolve("x", selector)

        selector.assert_not_called()
        assert source is ReconcileSource.SELECTION_FALLBACK
        assert {c.id for c in configs} == {"a", "c"}
        assert configs == [abcd_template[0], abcd_template[2]]

    def test_empty_layout_list_counts_as_missing(self, abcd_template, template_lookup):
        state = SavedState(
            panel_layouts={"x": []},
            setup_sections={"x": True},
            section_panel_selections={"x": ["d"]},
        )
        flow = SectionSetupFlow(state, template_lookup({"x": abcd_template}))
        configs, _ = flow.resolve("x")
        assert [c.id for c in configs] == ["d"]

    def test_configured_without_selection_yields_nothing(self, abc_template, template_lookup):
        state = SavedState(setup_sections={"x": True})
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template}))
        configs, source = flow.resolve("x")
        assert configs == []
        assert source is ReconcileSource.SELECTION_FALLBACK

    def test_needs_setup(self, abc_template, template_lookup):
        state = SavedState(setup_sections={"y": True})
        flow = SectionSetupFlow(state, template_lookup({"x": abc_template, "y": abc_template}))
        assert flow.needs_setup("x") is True
        assert flow.needs_setup("y") is False
