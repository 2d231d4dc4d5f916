"""CLI entry point.

This module handles command-line argument parsing, logging setup and
dispatch to the batch commands or the interactive board.
"""

from __future__ import annotations

import argparse
import json
import logging
import logging.handlers
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from . import commands
from .errors import TackboardError
from .store import Store

logger = logging.getLogger(__name__)

LOG_FILE = Path.home() / ".cache" / "tackboard" / "tackboard.log"
CARD_ID_HELP = (
    "Card id, or a 1-based number counted over the whole board by card order "
    "(not the per-column numbers shown by list)"
)


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log line
        """
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "event": record.getMessage(),
            "context": {
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_context"):
            log_data["context"].update(record.extra_context)

        return json.dumps(log_data)


def _setup_logging(log_file: Path, debug: bool) -> None:
    """Setup structured JSON logging to file.

    Nothing is logged to the terminal, which the interactive board owns.

    Args:
        log_file: Path to log file
        debug: Enable debug level logging
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        # Read-only home directory: keep running without a log file.
        file_handler = logging.NullHandler()

    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(file_handler)

    logger.debug(
        "Logging initialized",
        extra={"extra_context": {"log_file": str(log_file), "debug": debug}},
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="tackboard",
        description="Kanban boards that live next to your code",
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=None,
        help="Path to the repository root (default: current directory)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    init_parser = sub.add_parser("init", help="Initialize board storage in the repository")
    init_parser.add_argument("--board-name", default="default", help="Name of the first board")

    list_parser = sub.add_parser("list", help="List the cards of a board")
    list_parser.add_argument("--board", default=None, help="Board name (default: active board)")

    add_parser = sub.add_parser("add", help="Add a card")
    add_parser.add_argument("title", help="Card title")
    add_parser.add_argument("--to", default="todo", help="Target column (default: todo)")
    add_parser.add_argument("--label", action="append", default=[], help="Label (repeatable)")
    add_parser.add_argument("--assignee", default=None, help="Assignee")

    move_parser = sub.add_parser("move", help="Move a card to another column")
    move_parser.add_argument("id", help=CARD_ID_HELP)
    move_parser.add_argument("--to", required=True, help="Target column")

    for name, help_text in (
        ("hoist", "Move a card to the top of its column"),
        ("demote", "Move a card to the bottom of its column"),
        ("archive", "Archive a card"),
        ("delete", "Delete a card permanently"),
    ):
        card_parser = sub.add_parser(name, help=help_text)
        card_parser.add_argument("id", help=CARD_ID_HELP)

    label_parser = sub.add_parser("label", help="Add or remove a label")
    label_parser.add_argument("id", help=CARD_ID_HELP)
    label_parser.add_argument("action", choices=["add", "remove"], help="add or remove")
    label_parser.add_argument("tag", help="Label text")

    assign_parser = sub.add_parser("assign", help="Assign a user to a card")
    assign_parser.add_argument("id", help=CARD_ID_HELP)
    assign_parser.add_argument("user", help="User name")

    board_parser = sub.add_parser("board", help="Board management")
    board_sub = board_parser.add_subparsers(dest="board_command", metavar="ACTION", required=True)
    board_create = board_sub.add_parser("create", help="Create a board")
    board_create.add_argument("name", help="Board name")
    board_switch = board_sub.add_parser("switch", help="Make a board the active one")
    board_switch.add_argument("name", help="Board name")
    board_sub.add_parser("list", help="List boards")

    sub.add_parser("tui", help="Open the interactive board")
    sub.add_parser("doctor", help="Check the board storage")
    sub.add_parser("version", help="Show version")

    return parser


def _run_tui(store: Store, console: Console) -> int:
    """Open the interactive board on the active board."""
    # Imported here: the terminal modules are only needed for the interactive board.
    from .tui.app import TUIApp
    from .tui.engine import BoardEngine

    config = store.load_config()
    engine = BoardEngine.from_gateway(store)
    logger.info(
        "TUI starting",
        extra={"extra_context": {"board": engine.board.name, "repo": str(store.repo_root)}},
    )
    return TUIApp(engine, config, console).run()


def _dispatch(args: argparse.Namespace, store: Store, console: Console) -> int:
    """Run the selected command.

    Returns:
        Exit code
    """
    as_json = args.json
    command = args.command

    if command == "init":
        commands.init(store, console, args.board_name)
    elif command == "list":
        commands.list_cards(store, console, args.board, as_json)
    elif command == "add":
        commands.add(store, console, args.title, args.to, args.label, args.assignee, as_json)
    elif command == "move":
        commands.move(store, console, args.id, args.to, as_json)
    elif command == "hoist":
        commands.hoist(store, console, args.id, as_json)
    elif command == "demote":
        commands.demote(store, console, args.id, as_json)
    elif command == "archive":
        commands.archive(store, console, args.id, as_json)
    elif command == "delete":
        commands.delete(store, console, args.id, as_json)
    elif command == "label":
        commands.label(store, console, args.id, args.action, args.tag, as_json)
    elif command == "assign":
        commands.assign(store, console, args.id, args.user, as_json)
    elif command == "board":
        if args.board_command == "create":
            commands.board_create(store, console, args.name, as_json)
        elif args.board_command == "switch":
            commands.board_switch(store, console, args.name, as_json)
        else:
            commands.board_list(store, console, as_json)
    elif command == "tui":
        return _run_tui(store, console)
    elif command == "doctor":
        return commands.doctor(store, console)
    elif command == "version":
        commands.version(console)
    else:
        console.print("tackboard: kanban boards that live next to your code.\n")
        console.print("Run `tackboard --help` for usage or `tackboard init` to get started.")
    return 0


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    """Main entry point.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        console: Console for output (defaults to stdout)

    Returns:
        Exit code (0=success, 1=error)
    """
    args = _build_parser().parse_args(argv)
    console = console if console is not None else Console()

    _setup_logging(LOG_FILE, args.debug)

    repo = (args.repo or Path.cwd()).resolve()
    store = Store(repo)
    logger.info(
        "Command invoked",
        extra={"extra_context": {"command": args.command, "repo": str(repo)}},
    )

    try:
        return _dispatch(args, store, console)
    except TackboardError as err:
        logger.error(
            "Command failed",
            extra={"extra_context": {"command": args.command, "error": str(err)}},
        )
        console.print(f"[red]Error: {escape(str(err))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
