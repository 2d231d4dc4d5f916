"""Batch command implementations.

Each command loads the active board, resolves the card token once right
before mutating, applies one operation from ``operations`` and saves the
whole board. Errors are raised as ``TackboardError`` subclasses and
reported by the CLI.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.markup import escape

from . import __version__, operations
from .errors import CardNotFoundError, TackboardError
from .models import Board
from .store import Store
from .tui.tui_utils import format_card_line

logger = logging.getLogger(__name__)


def _print_json(console: Console, payload: Any) -> None:
    console.print(
        json.dumps(payload, indent=2, ensure_ascii=False),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _load_active(store: Store, board_name: str | None = None) -> Board:
    config = store.load_config()
    return store.load_board(board_name or config.default_board)


def _resolve(board: Board, token: str) -> str:
    card_id = board.resolve(token)
    if card_id is None:
        raise CardNotFoundError(token)
    return card_id


def init(store: Store, console: Console, board_name: str = "default") -> None:
    store.init(board_name)
    console.print(f"Initialized tackboard in {escape(str(store.data_dir))}")


def list_cards(
    store: Store, console: Console, board_name: str | None = None, json_output: bool = False
) -> None:
    """Print every column with its numbered, non-archived cards."""
    board = _load_active(store, board_name)

    if json_output:
        _print_json(console, board.to_dict())
        return

    for column in board.columns:
        cards = board.column_cards(column.name)
        wip = f" [{len(cards)}/{column.wip_limit}]" if column.wip_limit is not None else ""
        console.print(f"[bold]── {escape(column.name.upper())} ({len(cards)}){escape(wip)} ──[/bold]")
        for number, card in enumerate(cards, start=1):
            line = format_card_line(card.title, card.labels, card.assignee)
            console.print(f"  {number}. {escape(line)}")
        console.print()


def add(
    store: Store,
    console: Console,
    title: str,
    column: str = "todo",
    labels: list[str] | None = None,
    assignee: str | None = None,
    json_output: bool = False,
) -> None:
    board = _load_active(store)
    card = operations.add_card(board, title, column, labels or (), assignee)
    store.save_board(board)
    logger.info(f"Added card {card.id} to {board.name}/{column}")

    if json_output:
        _print_json(console, card.to_dict())
    else:
        console.print(f"Added: {escape(card.title)} → {escape(card.column)}")


def move(store: Store, console: Console, token: str, column: str, json_output: bool = False) -> None:
    board = _load_active(store)
    card = operations.move_card(board, _resolve(board, token), column)
    store.save_board(board)

    if json_output:
        _print_json(console, card.to_dict())
    else:
        console.print(f"Moved: {escape(card.title)} → {escape(column)}")


def hoist(store: Store, console: Console, token: str, json_output: bool = False) -> None:
    board = _load_active(store)
    card = operations.hoist_card(board, _resolve(board, token))
    store.save_board(board)

    if json_output:
        _print_json(console, card.to_dict())
    else:
        console.print(f"Hoisted: {escape(card.title)} to top of {escape(card.column)}")


def demote(store: Store, console: Console, token: str, json_output: bool = False) -> None:
    board = _load_active(store)
    card = operations.demote_card(board, _resolve(board, token))
    store.save_board(board)

    if json_output:
        _print_json(console, card.to_dict())
    else:
        console.print(f"Demoted: {escape(card.title)} to bottom of {escape(card.column)}")


def archive(store: Store, console: Console, token: str, json_output: bool = False) -> None:
    board = _load_active(store)
    card = operations.archive_card(board, _resolve(board, token))
    store.save_board(board)

    if json_output:
        _print_json(console, card.to_dict())
    else:
        console.print(f"Archived: {escape(card.title)}")


def delete(store: Store, console: Console, token: str, json_output: bool = False) -> None:
    board = _load_active(store)
    card = operations.delete_card(board, _resolve(board, token))
    store.save_board(board)

    if json_output:
        _print_json(console, {"deleted": card.id, "title": card.title})
    else:
        console.print(f"Deleted: {escape(card.title)}")


def label(
    store: Store, console: Console, token: str, action: str, tag: str, json_output: bool = False
) -> None:
    board = _load_active(store)
    card_id = _resolve(board, token)
    if action == "add":
        card = operations.add_label(board, card_id, tag)
    elif action == "remove":
        card = operations.remove_label(board, card_id, tag)
    else:
        raise TackboardError(f"Invalid label action: {action}. Use 'add' or 'remove'.")
    store.save_board(board)

    if json_output:
        _print_json(console, card.to_dict())
    else:
        tags = "[" + ", ".join(card.labels) + "]"
        console.print(f"Labels on {escape(card.title)}: {escape(tags)}")


def assign(store: Store, console: Console, token: str, user: str, json_output: bool = False) -> None:
    board = _load_active(store)
    card = operations.assign_card(board, _resolve(board, token), user)
    store.save_board(board)

    if json_output:
        _print_json(console, card.to_dict())
    else:
        console.print(f"Assigned {escape(card.title)} to @{escape(user)}")


def board_create(store: Store, console: Console, name: str, json_output: bool = False) -> None:
    store.create_board(name)
    if json_output:
        _print_json(console, {"created": name})
    else:
        console.print(f"Created board: {escape(name)}")


def board_switch(store: Store, console: Console, name: str, json_output: bool = False) -> None:
    store.load_board(name)
    config = store.load_config()
    config.default_board = name
    store.save_config(config)
    if json_output:
        _print_json(console, {"active": name})
    else:
        console.print(f"Switched to board: {escape(name)}")


def board_list(store: Store, console: Console, json_output: bool = False) -> None:
    config = store.load_config()
    boards = store.list_boards()
    if json_output:
        _print_json(console, boards)
        return
    for name in boards:
        marker = "*" if name == config.default_board else " "
        console.print(f"{marker} {escape(name)}")


def doctor(store: Store, console: Console) -> int:
    """Report the health of the board storage.

    Returns:
        Exit code (0 when every check passed, 1 otherwise)
    """
    console.print("[bold]tackboard doctor[/bold]")
    console.print("────────────────")

    if not store.is_initialized():
        console.print(f"  [red]\\[!!][/red] {escape(str(store.data_dir))} not found. Run `tackboard init`.")
        return 1
    console.print(f"  [green]\\[OK][/green] {escape(str(store.data_dir))} found")

    healthy = True
    try:
        config = store.load_config()
        console.print(
            f"  [green]\\[OK][/green] config.json (v{escape(config.version)}, "
            f"active board: {escape(config.default_board)})"
        )
    except TackboardError as err:
        healthy = False
        console.print(f"  [red]\\[!!][/red] config.json: {escape(str(err))}")

    try:
        boards = store.list_boards()
    except TackboardError as err:
        console.print(f"  [red]\\[!!][/red] boards: {escape(str(err))}")
        return 1

    console.print(f"  [green]\\[OK][/green] {len(boards)} board(s): {escape(', '.join(boards))}")
    for name in boards:
        try:
            board = store.load_board(name)
        except TackboardError as err:
            healthy = False
            console.print(f"       └─ {escape(name)}: [red]ERROR[/red]: {escape(str(err))}")
            continue
        active = sum(1 for card in board.cards if not card.archived)
        archived = len(board.cards) - active
        console.print(f"       └─ {escape(name)}: {active} active, {archived} archived")

    if healthy:
        console.print("\nAll checks passed.")
        return 0
    console.print("\n[red]Some checks failed.[/red]")
    return 1


def version(console: Console) -> None:
    console.print(f"tackboard {__version__}")
