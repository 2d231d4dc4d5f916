"""Board persistence.

This module defines the gateway protocol the interactive engine depends on
and the file-backed Store that implements it. Boards and the repository
configuration are written as whole JSON documents:

    <repo>/.tackboard/config.json
    <repo>/.tackboard/boards/<name>.json

The Store performs no file locking. A concurrent writer in another process
can overwrite changes.
"""

from __future__ import annotations

import json
import logging
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from .errors import (
    AlreadyInitializedError,
    BoardExistsError,
    BoardNotFoundError,
    InvalidNameError,
    NotInitializedError,
    StorageError,
)
from .models import Board, Column, RepoConfig

logger = logging.getLogger(__name__)

DATA_DIR_NAME = ".tackboard"
BOARD_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class BoardGateway(Protocol):
    """Interface for board storage consumed by the interactive engine.

    Every method may raise a ``TackboardError`` (or ``OSError``); callers
    treat any failure as "the operation did not happen".
    """

    def load_config(self) -> RepoConfig:
        """Load the per-repository configuration."""
        ...

    def save_config(self, config: RepoConfig) -> None:
        """Persist the per-repository configuration."""
        ...

    def load_board(self, name: str) -> Board:
        """Load a board by name.

        Raises:
            BoardNotFoundError: If no document exists for the name.
        """
        ...

    def save_board(self, board: Board) -> None:
        """Overwrite the whole document for ``board.name``."""
        ...

    def list_boards(self) -> list[str]:
        """Return the available board names in ascending order."""
        ...


def validate_board_name(name: str) -> str:
    """Return the name if it is usable as a board file name.

    Raises:
        InvalidNameError: If the name is empty or contains other characters
            than letters, digits, ``.``, ``_`` and ``-``.
    """
    if not BOARD_NAME_RE.match(name) or name in (".", ".."):
        raise InvalidNameError(
            f"Invalid board name: {name!r} (use letters, digits, '.', '_' or '-')"
        )
    return name


class Store:
    """File-backed implementation of ``BoardGateway`` rooted at a repository."""

    def __init__(self, repo_root: Path):
        """Initialize the store.

        Args:
            repo_root: Repository directory holding the ``.tackboard`` folder
        """
        self.repo_root = Path(repo_root)

    @property
    def data_dir(self) -> Path:
        return self.repo_root / DATA_DIR_NAME

    @property
    def boards_dir(self) -> Path:
        return self.data_dir / "boards"

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.json"

    def board_path(self, name: str) -> Path:
        return self.boards_dir / f"{validate_board_name(name)}.json"

    def is_initialized(self) -> bool:
        return self.data_dir.exists()

    def init(self, board_name: str = "default") -> None:
        """Create the data directory with a default config and board.

        Raises:
            AlreadyInitializedError: If the data directory already exists.
        """
        if self.is_initialized():
            raise AlreadyInitializedError(str(self.data_dir))
        validate_board_name(board_name)

        try:
            self.boards_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StorageError(f"Failed to create {self.boards_dir}: {err}") from err

        self._write_json(self.config_path, RepoConfig(default_board=board_name).to_dict())
        self._write_json(
            self.board_path(board_name), Board.default_board(board_name).to_dict()
        )
        logger.info(f"Initialized board storage at {self.data_dir}")

    # -------------------- config --------------------

    def load_config(self) -> RepoConfig:
        self._ensure_initialized()
        return RepoConfig.from_dict(self._read_json(self.config_path))

    def save_config(self, config: RepoConfig) -> None:
        self._ensure_initialized()
        self._write_json(self.config_path, config.to_dict())

    # -------------------- boards --------------------

    def load_board(self, name: str) -> Board:
        self._ensure_initialized()
        path = self.board_path(name)
        if not path.exists():
            raise BoardNotFoundError(name)
        data = self._read_json(path)
        try:
            return Board.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            raise StorageError(f"Invalid board document {path}: {err}") from err

    def save_board(self, board: Board) -> None:
        self._ensure_initialized()
        self._write_json(self.board_path(board.name), board.to_dict())
        logger.debug(f"Saved board {board.name} ({len(board.cards)} cards)")

    def list_boards(self) -> list[str]:
        self._ensure_initialized()
        try:
            return sorted(path.stem for path in self.boards_dir.glob("*.json") if path.is_file())
        except OSError as err:
            raise StorageError(f"Failed to list boards: {err}") from err

    def create_board(self, name: str, columns: list[Column] | None = None) -> Board:
        """Create and persist an empty board.

        Args:
            name: Board name (also the file stem)
            columns: Columns for the board; the default todo/doing/done when None

        Returns:
            The newly created board

        Raises:
            BoardExistsError: If a document already exists for the name.
        """
        self._ensure_initialized()
        path = self.board_path(name)
        if path.exists():
            raise BoardExistsError(name)
        if columns is None:
            board = Board.default_board(name)
        else:
            board = Board(name=name, columns=list(columns))
        self._write_json(path, board.to_dict())
        logger.info(f"Created board {name}")
        return board

    # -------------------- helpers --------------------

    def _ensure_initialized(self) -> None:
        if not self.is_initialized():
            raise NotInitializedError()

    def _read_json(self, path: Path) -> dict[str, Any]:
        try:
            data = json.loads(path.read_bytes().decode("utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as err:
            raise StorageError(f"Failed to read {path}: {err}") from err
        if not isinstance(data, dict):
            raise StorageError(f"Failed to read {path}: expected a JSON object")
        return data

    def _write_json(self, path: Path, payload: dict[str, Any]) -> None:
        """Write a document atomically: temp file in the same directory, then rename."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path_str = tempfile.mkstemp(
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                text=True,
            )
        except OSError as err:
            raise StorageError(f"Failed to write {path}: {err}") from err

        temp_path = Path(temp_path_str)
        try:
            with open(temp_fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as err:
            temp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {err}") from err
