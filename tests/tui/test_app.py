"""Tests for the TUI application loop, layout and keyboard polling."""

from __future__ import annotations

import os
from collections.abc import Iterator
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from rich.align import Align
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tackboard.models import Board, RepoConfig
from tackboard.tui import keys
from tackboard.tui.app import TUIApp, raw_terminal
from tackboard.tui.engine import BoardEngine
from tackboard.tui.keys import KeyEvent
from tackboard.tui.state import Mode


@pytest.fixture
def pipe() -> Iterator[tuple[int, int]]:
    """A pipe standing in for the terminal: (read fd, write fd)."""
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    os.close(read_fd)
    os.close(write_fd)


@pytest.fixture
def engine() -> BoardEngine:
    gateway = MagicMock()
    return BoardEngine(gateway, Board.default_board())


@pytest.fixture
def tui_app(engine: BoardEngine, pipe: tuple[int, int]) -> TUIApp:
    console = Console(file=StringIO(), width=100, legacy_windows=False)
    return TUIApp(engine, RepoConfig(), console, stdin_fd=pipe[0])


class TestPollKeyboard:
    """Tests for reading key events from the input descriptor."""

    def test_no_input_returns_none(self, tui_app: TUIApp) -> None:
        assert tui_app._poll_keyboard(timeout=0.01) is None

    def test_single_key(self, tui_app: TUIApp, pipe: tuple[int, int]) -> None:
        os.write(pipe[1], b"j")
        assert tui_app._poll_keyboard(timeout=0.1) == KeyEvent("j")

    def test_arrow_key(self, tui_app: TUIApp, pipe: tuple[int, int]) -> None:
        os.write(pipe[1], b"\x1b[A")
        assert tui_app._poll_keyboard(timeout=0.1) == KeyEvent(keys.UP)

    def test_ctrl_c(self, tui_app: TUIApp, pipe: tuple[int, int]) -> None:
        os.write(pipe[1], b"\x03")
        assert tui_app._poll_keyboard(timeout=0.1) == KeyEvent("c", ctrl=True)

    def test_burst_is_handed_out_one_key_per_call(
        self, tui_app: TUIApp, pipe: tuple[int, int]
    ) -> None:
        os.write(pipe[1], b"ab\r")
        events = [tui_app._poll_keyboard(timeout=0.1) for _ in range(3)]
        assert events == [KeyEvent("a"), KeyEvent("b"), KeyEvent(keys.ENTER)]
        assert tui_app._poll_keyboard(timeout=0.01) is None

    def test_multibyte_character_split_across_reads(
        self, tui_app: TUIApp, pipe: tuple[int, int]
    ) -> None:
        encoded = "é".encode()
        os.write(pipe[1], encoded[:1])
        assert tui_app._poll_keyboard(timeout=0.1) is None
        os.write(pipe[1], encoded[1:])
        assert tui_app._poll_keyboard(timeout=0.1) == KeyEvent("é")

    def test_unknown_sequence_ignored(self, tui_app: TUIApp, pipe: tuple[int, int]) -> None:
        os.write(pipe[1], b"\x1b[15~")
        assert tui_app._poll_keyboard(timeout=0.1) is None


class TestLayout:
    """Tests for building and filling the layout."""

    def test_build_layout_regions(self, tui_app: TUIApp) -> None:
        layout = tui_app._build_layout()
        assert layout["title"].size == 1
        assert layout["footer"].size == 1
        assert layout["body"] is not None

    def test_normal_mode_shows_board(self, tui_app: TUIApp) -> None:
        layout = tui_app._build_layout()
        tui_app._render_layout(layout)
        assert isinstance(layout["body"].renderable, Table)
        assert isinstance(layout["footer"].renderable, Text)

    def test_help_mode_shows_overlay(self, tui_app: TUIApp) -> None:
        tui_app.engine.handle_key(KeyEvent("?"))
        layout = tui_app._build_layout()
        tui_app._render_layout(layout)
        assert isinstance(layout["body"].renderable, Align)

    def test_board_picker_shows_overlay(self, tui_app: TUIApp) -> None:
        tui_app.engine.gateway.list_boards.return_value = ["default", "work"]
        tui_app.engine.handle_key(KeyEvent("b"))
        assert tui_app.engine.mode is Mode.BOARD_PICKER

        layout = tui_app._build_layout()
        tui_app._render_layout(layout)
        assert isinstance(layout["body"].renderable, Align)

    def test_check_terminal_size(self, tui_app: TUIApp) -> None:
        with patch("tackboard.tui.app.get_terminal_size", return_value=(100, 30)):
            assert tui_app._check_terminal_size() is True
            assert tui_app._size_warning() is None
        with patch("tackboard.tui.app.get_terminal_size", return_value=(40, 10)):
            assert tui_app._check_terminal_size() is False
            assert "Terminal too small" in tui_app._size_warning()  # type: ignore[operator]


class TestRun:
    """Tests for the main loop."""

    def test_quit_key_ends_loop(self, tui_app: TUIApp, pipe: tuple[int, int]) -> None:
        os.write(pipe[1], b"jq")
        with patch("tackboard.tui.app.Live") as mock_live:
            assert tui_app.run() == 0
        assert tui_app.engine.state.should_quit
        live = mock_live.return_value.__enter__.return_value
        assert live.update.call_count == 2

    def test_ctrl_c_ends_loop(self, tui_app: TUIApp, pipe: tuple[int, int]) -> None:
        tui_app.engine.handle_key(KeyEvent("a"))
        os.write(pipe[1], b"\x03")
        with patch("tackboard.tui.app.Live"):
            assert tui_app.run() == 0
        assert tui_app.engine.state.should_quit

    def test_keyboard_interrupt(self, tui_app: TUIApp) -> None:
        with patch("tackboard.tui.app.Live", side_effect=KeyboardInterrupt):
            assert tui_app.run() == 130


class TestRawTerminal:
    """Tests for terminal mode handling."""

    def test_non_terminal_is_noop(self, pipe: tuple[int, int]) -> None:
        with raw_terminal(pipe[0]):
            pass
