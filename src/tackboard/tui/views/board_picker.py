"""Board picker renderer for switching the active board."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.text import Text


def render_board_picker(board_list: list[str], selected: int, active_board: str) -> Panel:
    """Build Rich Panel listing boards with the picker selection highlighted.

    Args:
        board_list: Board names in display order
        selected: Index of the highlighted entry
        active_board: Name of the board currently loaded (marked with ``*``)

    Returns:
        Rich Panel component
    """
    lines: list[Text] = []
    for index, name in enumerate(board_list):
        is_active = name == active_board
        prefix = "* " if is_active else "  "
        if index == selected:
            style = "bold black on cyan"
        elif is_active:
            style = "bold cyan"
        else:
            style = "white"
        lines.append(Text(f"{prefix}{name}", style=style))

    if not lines:
        lines.append(Text("No boards found", style="dim italic"))

    return Panel(
        Group(*lines),
        title="[bold white]Switch Board[/bold white]",
        border_style="cyan",
        width=40,
        padding=(0, 1),
    )
