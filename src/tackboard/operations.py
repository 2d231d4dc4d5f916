"""In-memory board mutations shared by the command line and the terminal UI.

Every function takes a resolved card id, mutates the board in place and
refreshes the card's ``updated_at``. None of them perform I/O; callers
persist the whole board afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import CardNotFoundError, ColumnNotFoundError, LabelNotFoundError
from .models import Board, Card

logger = logging.getLogger(__name__)


def _require_card(board: Board, card_id: str) -> Card:
    card = board.find_mut(card_id)
    if card is None:
        raise CardNotFoundError(card_id)
    return card


def _require_column(board: Board, column: str) -> None:
    if not board.has_column(column):
        raise ColumnNotFoundError(column)


def _dedupe(labels: Iterable[str]) -> list[str]:
    result: list[str] = []
    for label in labels:
        if label not in result:
            result.append(label)
    return result


def add_card(
    board: Board,
    title: str,
    column: str,
    labels: Iterable[str] = (),
    assignee: str | None = None,
) -> Card:
    """Append a new card at the bottom of a column."""
    _require_column(board, column)
    card = Card.new(title, column)
    card.order = board.next_order(column)
    card.labels = _dedupe(labels)
    card.assignee = assignee
    board.cards.append(card)
    logger.debug(f"Added card {card.id} to {column} at order {card.order}")
    return card


def move_card(board: Board, card_id: str, column: str) -> Card:
    """Move a card to the bottom of another column."""
    _require_column(board, column)
    card = _require_card(board, card_id)
    order = board.next_order(column)
    card.column = column
    card.order = order
    card.touch()
    logger.debug(f"Moved card {card.id} to {column} at order {order}")
    return card


def hoist_card(board: Board, card_id: str) -> Card:
    """Move a card to the top of its column.

    Every other non-archived card in the column is shifted down by one.
    """
    card = _require_card(board, card_id)
    for other in board.cards:
        if other.column == card.column and not other.archived and other.id != card.id:
            other.order += 1
    card.order = 0
    card.touch()
    logger.debug(f"Hoisted card {card.id} in {card.column}")
    return card


def demote_card(board: Board, card_id: str) -> Card:
    """Move a card to the bottom of its column."""
    card = _require_card(board, card_id)
    card.order = board.next_order(card.column)
    card.touch()
    logger.debug(f"Demoted card {card.id} in {card.column} to order {card.order}")
    return card


def archive_card(board: Board, card_id: str) -> Card:
    card = _require_card(board, card_id)
    card.archived = True
    card.touch()
    logger.debug(f"Archived card {card.id}")
    return card


def delete_card(board: Board, card_id: str) -> Card:
    """Remove a card from the board permanently and return it."""
    card = _require_card(board, card_id)
    board.cards = [c for c in board.cards if c.id != card.id]
    logger.debug(f"Deleted card {card.id}")
    return card


def add_label(board: Board, card_id: str, tag: str) -> Card:
    card = _require_card(board, card_id)
    if tag not in card.labels:
        card.labels.append(tag)
    card.touch()
    return card


def remove_label(board: Board, card_id: str, tag: str) -> Card:
    card = _require_card(board, card_id)
    if tag not in card.labels:
        raise LabelNotFoundError(tag)
    card.labels = [label for label in card.labels if label != tag]
    card.touch()
    return card


def assign_card(board: Board, card_id: str, user: str) -> Card:
    card = _require_card(board, card_id)
    card.assignee = user
    card.touch()
    return card
