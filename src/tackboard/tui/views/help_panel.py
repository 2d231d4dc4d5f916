"""Help panel renderer for keybinding reference.

This module provides the render_help_panel function that displays
a table of all available keybindings organized by category.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table


def render_help_panel() -> Panel:
    """Build Rich Panel displaying keybinding reference table.

    Returns:
        Rich Panel component with categorized keybindings
    """
    table = Table(
        show_header=True,
        header_style="bold magenta",
        border_style="blue",
        padding=(0, 1),
    )
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Action", style="yellow")
    table.add_column("Description", style="white")

    table.add_row("", "[bold cyan]Navigation[/bold cyan]", "", style="bold")
    table.add_row("h/l or ←/→", "Switch columns", "Select the previous/next column")
    table.add_row("j/k or ↓/↑", "Navigate", "Move up/down within the column")
    table.add_row("gg", "Jump to top", "Select the first card")
    table.add_row("G", "Jump to bottom", "Select the last card")

    table.add_row("", "", "")
    table.add_row("", "[bold green]Actions[/bold green]", "", style="bold")
    table.add_row("a", "Add", "Add a card to the current column")
    table.add_row("d", "Delete", "Delete the selected card (asks to confirm)")
    table.add_row("x", "Archive", "Archive the selected card")
    table.add_row("L / >", "Move right", "Move the card to the next column")
    table.add_row("H / <", "Move left", "Move the card to the previous column")
    table.add_row("K", "Hoist", "Move the card to the top of its column")
    table.add_row("J", "Demote", "Move the card to the bottom of its column")

    table.add_row("", "", "")
    table.add_row("", "[bold magenta]Other[/bold magenta]", "", style="bold")
    table.add_row("b", "Boards", "Switch to another board")
    table.add_row("/", "Search", "Filter cards by title, Esc to clear")
    table.add_row("r", "Refresh", "Reload the board from disk")
    table.add_row("?", "Help", "Toggle this help panel")
    table.add_row("q / Ctrl+C", "Quit", "Exit the board")

    return Panel(
        table,
        title="[bold white]Keybindings[/bold white]",
        subtitle="[dim]Esc, q or ? to close[/dim]",
        border_style="blue",
        padding=(1, 2),
    )
