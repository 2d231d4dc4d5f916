"""TUI utility functions for formatting and display helpers."""

import shutil


def truncate_text(text: str, max_len: int) -> str:
    """
    Truncate text to max length, adding ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length including ellipsis

    Returns:
        Truncated text with "..." suffix if text exceeds max_len

    Examples:
        >>> truncate_text("short", 10)
        'short'
        >>> truncate_text("this is a long text", 10)
        'this is...'
    """
    if max_len <= 0:
        return ""

    if len(text) <= max_len:
        return text

    if max_len <= 3:
        return "..."[:max_len]

    return text[: max_len - 3] + "..."


def get_terminal_size() -> tuple[int, int]:
    """
    Get terminal size as (columns, rows) tuple.

    Returns:
        Tuple of (columns, rows), defaults to (80, 24) if unavailable
    """
    try:
        size = shutil.get_terminal_size(fallback=(80, 24))
        return (size.columns, size.lines)
    except OSError:
        return (80, 24)


def format_card_line(title: str, labels: list[str], assignee: str | None) -> str:
    """
    Build the one-line text shown for a card.

    Examples:
        >>> format_card_line("Fix login", ["bug", "p1"], "sam")
        'Fix login [bug,p1] @sam'
        >>> format_card_line("Write docs", [], None)
        'Write docs'
    """
    text = title
    if labels:
        text += f" [{','.join(labels)}]"
    if assignee:
        text += f" @{assignee}"
    return text
