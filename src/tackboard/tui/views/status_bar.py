"""Status bar renderer for the mode indicator.

This module provides the render_status_bar function that displays the
current mode followed by the text being typed, the status message or a
help hint.
"""

from __future__ import annotations

from rich.text import Text

from ..state import Mode, UIState
from ..tui_utils import truncate_text


def _status_content(state: UIState) -> str:
    if state.mode is Mode.INSERT:
        return state.input_buf
    if state.mode is Mode.SEARCH:
        return f"/{state.search_buf}"
    if state.message:
        return state.message
    return "? for help"


def render_status_bar(
    state: UIState,
    terminal_width: int = 80,
    warning: str | None = None,
) -> Text:
    """Build Rich Text displaying the status bar.

    Args:
        state: Current UI state (mode, buffers, message)
        terminal_width: Terminal width for truncation calculations
        warning: Optional warning (e.g. terminal too small) shown after the content

    Returns:
        Rich Text component ready for rendering
    """
    mode_part = f" {state.mode.label} │ "
    content = _status_content(state)
    available = max(terminal_width - len(mode_part), 0)

    footer = Text(style="on bright_black")
    footer.append(mode_part, style="bold black on bright_black")

    if warning:
        warning_part = f" │ {warning}"
        content_width = max(available - len(warning_part), 0)
        footer.append(truncate_text(content, content_width), style="bold white on bright_black")
        footer.append(truncate_text(warning_part, available), style="bold red on bright_black")
    else:
        footer.append(truncate_text(content, available), style="bold white on bright_black")

    return footer
