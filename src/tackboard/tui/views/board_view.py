"""Board renderer for the column layout.

This module provides the render_board and render_title_bar functions that
turn a BoardView projection into Rich components: one bordered panel per
column, the selected column highlighted and the selected card reversed.
"""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..projection import BoardView, ColumnView
from ..tui_utils import format_card_line


def _column_header(column: ColumnView) -> str:
    """Build the column title, e.g. ``DOING (2) [3/2]``.

    Args:
        column: Column projection

    Returns:
        Header text with visible count and WIP usage when a limit is set
    """
    header = f"{column.name.upper()} ({len(column.cards)})"
    if column.wip_limit is not None:
        header += f" [{column.wip_count}/{column.wip_limit}]"
    return header


def render_column(column: ColumnView, is_selected: bool) -> Panel:
    """Build a Rich Panel listing a column's visible cards.

    Args:
        column: Column projection to render
        is_selected: Whether this is the selected column

    Returns:
        Rich Panel component
    """
    lines: list[Text] = []
    for row, card in enumerate(column.cards):
        text = format_card_line(card.title, card.labels, card.assignee)
        if column.selected_row == row:
            lines.append(Text(text, style="bold black on cyan", no_wrap=True, overflow="ellipsis"))
        else:
            lines.append(Text(text, style="white", no_wrap=True, overflow="ellipsis"))

    if not lines:
        lines.append(Text("(empty)", style="dim italic"))

    title_style = "bold red" if column.over_limit else "bold"
    return Panel(
        Group(*lines),
        title=Text(_column_header(column), style=title_style),
        title_align="left",
        border_style="cyan" if is_selected else "bright_black",
        padding=(0, 1),
    )


def render_board(view: BoardView) -> Table:
    """Build a Rich grid with one panel per column, left to right.

    Args:
        view: Board projection to render

    Returns:
        Rich Table grid expanding to the full width
    """
    grid = Table.grid(expand=True, padding=(0, 1))
    if not view.columns:
        grid.add_column()
        grid.add_row(Text("This board has no columns", style="dim italic", justify="center"))
        return grid

    for _ in view.columns:
        grid.add_column(ratio=1)
    grid.add_row(
        *(
            render_column(column, index == view.selected_col)
            for index, column in enumerate(view.columns)
        )
    )
    return grid


def render_title_bar(view: BoardView) -> Text:
    """Build the one-line title bar with board name and active card count."""
    return Text(
        f" tackboard  │  {view.board_name}  │  {view.active_card_count} cards",
        style="bold black on cyan",
        no_wrap=True,
        overflow="ellipsis",
    )
