"""Main TUI application loop and layout.

This module runs the interactive board: a blocking input poll with a short
timeout, at most one key handled per iteration, and an unconditional
re-render through Rich Live so idle iterations still refresh the screen.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
import tty
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager

from rich.align import Align
from rich.console import Console
from rich.layout import Layout
from rich.live import Live

from ..models import RepoConfig
from .engine import BoardEngine
from .keys import KeyEvent, decode_key, split_sequences
from .state import Mode
from .tui_utils import get_terminal_size
from .views.board_picker import render_board_picker
from .views.board_view import render_board, render_title_bar
from .views.help_panel import render_help_panel
from .views.status_bar import render_status_bar

logger = logging.getLogger(__name__)


@contextmanager
def raw_terminal(fd: int) -> Iterator[None]:
    """Put the terminal in cbreak mode with signal keys delivered as input.

    Ctrl+C then arrives as ``\\x03`` and is handled as the force-quit key.
    Does nothing when ``fd`` is not a terminal.
    """
    try:
        saved = termios.tcgetattr(fd)
    except termios.error:
        yield
        return

    try:
        tty.setcbreak(fd)
        attrs = termios.tcgetattr(fd)
        attrs[3] &= ~termios.ISIG
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class TUIApp:
    """Main TUI application driving one BoardEngine."""

    def __init__(
        self,
        engine: BoardEngine,
        config: RepoConfig | None = None,
        console: Console | None = None,
        stdin_fd: int | None = None,
    ):
        """Initialize TUI application.

        Args:
            engine: Engine holding the active board and UI state
            config: Repository configuration with terminal settings
            console: Rich console to render to
            stdin_fd: File descriptor to read keys from (stdin by default)
        """
        self.engine = engine
        self.config = config if config is not None else RepoConfig()
        self.console = console if console is not None else Console()
        self.stdin_fd = stdin_fd if stdin_fd is not None else sys.stdin.fileno()

        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending_keys: deque[KeyEvent] = deque()

        self.terminal_width, self.terminal_height = get_terminal_size()

    def _check_terminal_size(self) -> bool:
        """Check if terminal meets minimum size requirements.

        Returns:
            True if terminal is large enough, False otherwise
        """
        self.terminal_width, self.terminal_height = get_terminal_size()
        return (
            self.terminal_width >= self.config.tui_min_terminal_cols
            and self.terminal_height >= self.config.tui_min_terminal_rows
        )

    def _size_warning(self) -> str | None:
        if self._check_terminal_size():
            return None
        return (
            f"Terminal too small! Need {self.config.tui_min_terminal_cols}x"
            f"{self.config.tui_min_terminal_rows}, got {self.terminal_width}x"
            f"{self.terminal_height}"
        )

    def _build_layout(self) -> Layout:
        """Build the title / board / status layout.

        Returns:
            Rich Layout with all regions configured
        """
        layout = Layout()
        layout.split_column(
            Layout(name="title", size=1),
            Layout(name="body", ratio=1),
            Layout(name="footer", size=1),
        )
        return layout

    def _render_layout(self, layout: Layout) -> None:
        """Render the current board and UI state into the layout.

        Args:
            layout: Layout to render into
        """
        state = self.engine.state
        view = self.engine.view()

        layout["title"].update(render_title_bar(view))

        if state.mode is Mode.HELP:
            layout["body"].update(Align.center(render_help_panel(), vertical="middle"))
        elif state.mode is Mode.BOARD_PICKER:
            picker = render_board_picker(
                state.board_list, state.board_selected, self.engine.board.name
            )
            layout["body"].update(Align.center(picker, vertical="middle"))
        else:
            layout["body"].update(render_board(view))

        layout["footer"].update(
            render_status_bar(state, self.terminal_width, warning=self._size_warning())
        )

    def _poll_keyboard(self, timeout: float = 0.1) -> KeyEvent | None:
        """Wait up to ``timeout`` seconds for one key event.

        Input that arrives in one read (fast typing, pastes) is queued and
        handed out one key per call.

        Args:
            timeout: Timeout in seconds

        Returns:
            The next key event, or None if nothing was pressed
        """
        if self._pending_keys:
            return self._pending_keys.popleft()

        ready, _, _ = select.select([self.stdin_fd], [], [], timeout)
        if not ready:
            return None

        try:
            data = os.read(self.stdin_fd, 1024)
        except OSError as err:
            logger.warning(f"Error reading keyboard input: {err}")
            return None

        text = self._decoder.decode(data)
        for sequence in split_sequences(text):
            event = decode_key(sequence)
            if event is None:
                logger.debug(f"Ignoring unknown key sequence {sequence!r}")
                continue
            self._pending_keys.append(event)

        if self._pending_keys:
            return self._pending_keys.popleft()
        return None

    def run(self) -> int:
        """Run the main TUI event loop until the engine asks to quit.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        layout = self._build_layout()
        self._render_layout(layout)

        try:
            with raw_terminal(self.stdin_fd), Live(
                layout,
                console=self.console,
                auto_refresh=False,
                screen=True,
            ) as live:
                logger.info("TUI main loop started")

                while not self.engine.state.should_quit:
                    event = self._poll_keyboard(timeout=self.config.tui_poll_seconds)
                    if event is not None:
                        logger.debug(f"Key {event} in {self.engine.mode.value} mode")
                        self.engine.handle_key(event)

                    self._render_layout(layout)
                    live.update(layout, refresh=True)

            logger.info("TUI main loop exited")
            return 0

        except KeyboardInterrupt:
            logger.info("TUI interrupted by user")
            return 130
