"""View projection from (Board, UI state) to a renderable layout.

The functions here are pure: they hold no state, never mutate the board,
and return the same layout for the same inputs.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Board, Card
from .state import UIState


@dataclass(frozen=True)
class ColumnView:
    """One column as it should be drawn."""

    name: str
    wip_limit: int | None
    wip_count: int  # Non-archived cards in the column, ignoring the search filter
    cards: tuple[Card, ...]
    selected_row: int | None  # Highlighted row, None when the column is not selected

    @property
    def over_limit(self) -> bool:
        return self.wip_limit is not None and self.wip_count > self.wip_limit


@dataclass(frozen=True)
class BoardView:
    """The whole board as it should be drawn."""

    board_name: str
    active_card_count: int
    selected_col: int
    columns: tuple[ColumnView, ...]

    @property
    def selected_card(self) -> Card | None:
        if not 0 <= self.selected_col < len(self.columns):
            return None
        column = self.columns[self.selected_col]
        if column.selected_row is None or column.selected_row >= len(column.cards):
            return None
        return column.cards[column.selected_row]


def matches_filter(card: Card, filter_text: str) -> bool:
    """Check whether a card title contains the filter text (case-insensitive)."""
    if not filter_text:
        return True
    return filter_text.lower() in card.title.lower()


def visible_cards(
    board: Board,
    column_name: str,
    filter_text: str = "",
    filter_active: bool = False,
) -> list[Card]:
    """Cards shown in a column: non-archived, filtered, sorted by order.

    Args:
        board: Board to project
        column_name: Column whose cards are wanted
        filter_text: Search text (case-insensitive title containment)
        filter_active: Whether the search filter applies at all

    Returns:
        Cards in display order
    """
    cards = board.column_cards(column_name)
    if filter_active and filter_text:
        cards = [card for card in cards if matches_filter(card, filter_text)]
    return cards


def project(board: Board, state: UIState) -> BoardView:
    """Build the renderable layout for the current board and UI state."""
    columns: list[ColumnView] = []
    for index, column in enumerate(board.columns):
        cards = visible_cards(board, column.name, state.search_buf, state.search_active)
        columns.append(
            ColumnView(
                name=column.name,
                wip_limit=column.wip_limit,
                wip_count=board.wip_count(column.name),
                cards=tuple(cards),
                selected_row=state.selected_row if index == state.selected_col else None,
            )
        )
    return BoardView(
        board_name=board.name,
        active_card_count=sum(1 for card in board.cards if not card.archived),
        selected_col=state.selected_col,
        columns=tuple(columns),
    )
