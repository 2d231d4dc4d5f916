"""Tests for help panel rendering."""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tackboard.tui.views.help_panel import render_help_panel


def _render_to_text(panel: Panel) -> str:
    """Helper to render panel to text for assertions."""
    console = Console(file=StringIO(), width=100, legacy_windows=False)
    console.print(panel)
    return console.file.getvalue()  # type: ignore


class TestRenderHelpPanel:
    """Tests for help panel rendering."""

    def test_returns_panel(self) -> None:
        """Verify return type is Rich Panel."""
        panel = render_help_panel()
        assert isinstance(panel, Panel)

    def test_panel_has_title(self) -> None:
        """Panel should have 'Keybindings' title."""
        panel = render_help_panel()
        assert "Keybindings" in str(panel.title)

    def test_table_has_correct_columns(self) -> None:
        """Table should have Key, Action, Description columns."""
        table = render_help_panel().renderable
        assert isinstance(table, Table)
        assert [column.header for column in table.columns] == ["Key", "Action", "Description"]

    def test_contains_all_sections(self) -> None:
        """All keybinding sections should be present."""
        panel_text = _render_to_text(render_help_panel())
        for section in ["Navigation", "Actions", "Other"]:
            assert section in panel_text, f"Missing section: {section}"

    def test_documents_card_actions(self) -> None:
        """Every card action should be listed."""
        panel_text = _render_to_text(render_help_panel())
        for action in ["Add", "Delete", "Archive", "Move right", "Move left", "Hoist", "Demote"]:
            assert action in panel_text

    def test_documents_meta_keys(self) -> None:
        panel_text = _render_to_text(render_help_panel())
        assert "Boards" in panel_text
        assert "Search" in panel_text
        assert "Refresh" in panel_text
        assert "Ctrl+C" in panel_text

    def test_panel_styling(self) -> None:
        """Panel should have appropriate styling."""
        panel = render_help_panel()
        assert panel.border_style == "blue"
        assert panel.padding == (1, 2)

    def test_consistent_rendering(self) -> None:
        """Multiple calls should produce identical output."""
        assert _render_to_text(render_help_panel()) == _render_to_text(render_help_panel())
