"""Tests for status bar rendering."""

from __future__ import annotations

from rich.text import Text

from tackboard.tui.state import Mode, UIState
from tackboard.tui.views.status_bar import render_status_bar


class TestRenderStatusBar:
    """Tests for render_status_bar."""

    def test_returns_text(self) -> None:
        assert isinstance(render_status_bar(UIState()), Text)

    def test_normal_mode_hint(self) -> None:
        text = render_status_bar(UIState())
        assert text.plain.startswith(" NORMAL │ ")
        assert "? for help" in text.plain

    def test_message_replaces_hint(self) -> None:
        text = render_status_bar(UIState(message="Hoisted to top."))
        assert "Hoisted to top." in text.plain
        assert "? for help" not in text.plain

    def test_insert_shows_buffer(self) -> None:
        state = UIState(mode=Mode.INSERT, input_buf="New card", message="Add card")
        text = render_status_bar(state)
        assert text.plain == " INSERT │ New card"

    def test_search_shows_query(self) -> None:
        state = UIState(mode=Mode.SEARCH, search_buf="login")
        assert render_status_bar(state).plain == " SEARCH │ /login"

    def test_board_picker_label(self) -> None:
        state = UIState(mode=Mode.BOARD_PICKER, message="Switch board")
        assert render_status_bar(state).plain.startswith(" BOARDS │ ")

    def test_truncates_to_width(self) -> None:
        state = UIState(message="x" * 200)
        text = render_status_bar(state, terminal_width=40)
        assert len(text.plain) <= 40
        assert text.plain.endswith("...")

    def test_warning_appended(self) -> None:
        text = render_status_bar(UIState(), terminal_width=120, warning="Terminal too small!")
        assert "Terminal too small!" in text.plain
