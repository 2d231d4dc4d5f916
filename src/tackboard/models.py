"""Board data models.

Card, Column and Board are plain dataclasses with ``to_dict``/``from_dict``
helpers matching the on-disk document shape. Optional fields are omitted
from the document when absent. Lookups never raise: a missing card or
column is reported as ``None`` and callers decide what that means.

Archived cards stay in ``Board.cards`` but are excluded from every
positional computation (ordering, numbering, WIP counts).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .errors import ConfigError
from .ids import new_id

DEFAULT_BOARD_NAME = "default"
DEFAULT_COLUMNS: tuple[str, ...] = ("todo", "doing", "done")
CONFIG_VERSION = "0.1.0"

_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with a ``Z`` suffix."""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting ``Z`` and sub-microsecond digits."""
    text = _FRACTION_RE.sub(r".\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclass
class Card:
    """A single unit of work on a board."""

    id: str
    title: str
    column: str
    order: int = 0
    description: str | None = None
    assignee: str | None = None
    labels: list[str] = field(default_factory=list)
    due: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    metadata: dict[str, Any] = field(default_factory=dict)
    archived: bool = False

    @classmethod
    def new(cls, title: str, column: str) -> Card:
        """Create a card with a fresh id and matching created/updated timestamps."""
        now = utc_now()
        return cls(id=new_id(), title=title, column=column, created_at=now, updated_at=now)

    def touch(self) -> None:
        """Refresh the last-update timestamp."""
        self.updated_at = utc_now()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "column": self.column,
            "order": self.order,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.assignee is not None:
            data["assignee"] = self.assignee
        data["labels"] = list(self.labels)
        if self.due is not None:
            data["due"] = format_timestamp(self.due)
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        data["metadata"] = dict(self.metadata)
        data["archived"] = self.archived
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        due = data.get("due")
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise TypeError("card metadata must be an object")
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            column=str(data["column"]),
            order=int(data["order"]),
            description=data.get("description"),
            assignee=data.get("assignee"),
            labels=[str(label) for label in data.get("labels") or []],
            due=parse_timestamp(due) if due else None,
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
            metadata=dict(metadata),
            archived=bool(data.get("archived", False)),
        )


@dataclass
class Column:
    """A named lane with an optional WIP limit."""

    name: str
    wip_limit: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.wip_limit is not None:
            data["wip_limit"] = self.wip_limit
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        wip_limit = data.get("wip_limit")
        return cls(
            name=str(data["name"]),
            wip_limit=int(wip_limit) if wip_limit is not None else None,
        )


@dataclass
class Board:
    """A named set of ordered columns and an unordered collection of cards."""

    name: str
    columns: list[Column] = field(default_factory=list)
    cards: list[Card] = field(default_factory=list)

    @classmethod
    def default_board(cls, name: str = DEFAULT_BOARD_NAME) -> Board:
        return cls(name=name, columns=[Column(name=col) for col in DEFAULT_COLUMNS])

    # -------------------- queries --------------------

    def has_column(self, name: str) -> bool:
        return any(col.name == name for col in self.columns)

    def active_cards(self) -> list[Card]:
        """Non-archived cards sorted by order (stable for equal orders)."""
        return sorted((c for c in self.cards if not c.archived), key=lambda c: c.order)

    def column_cards(self, column: str) -> list[Card]:
        """Non-archived cards of one column sorted by order."""
        return [c for c in self.active_cards() if c.column == column]

    def wip_count(self, column: str) -> int:
        return sum(1 for c in self.cards if c.column == column and not c.archived)

    def next_order(self, column: str) -> int:
        """One past the highest order in the column, or 0 for an empty column."""
        orders = [c.order for c in self.cards if c.column == column and not c.archived]
        return max(orders) + 1 if orders else 0

    def find(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    # Cards are mutable dataclasses, so the mutable lookup is the same object.
    find_mut = find

    def find_card_by_number(self, number: int) -> Card | None:
        """Return the Nth (1-based) non-archived card sorted by order."""
        if number < 1:
            return None
        active = self.active_cards()
        if number > len(active):
            return None
        return active[number - 1]

    def resolve(self, token: str) -> str | None:
        """Resolve a card id or a 1-based position to a card id.

        Positions count non-archived cards across the whole board sorted by
        ``order`` (see ``active_cards``), not within one column, so they do
        not match the per-column numbers printed by ``list``. Positions are
        computed from the current card set, so a position is stale after any
        mutation and must be resolved again.
        """
        token = token.strip()
        if token.isascii() and token.isdigit():
            card = self.find_card_by_number(int(token))
        else:
            card = self.find(token)
        return card.id if card else None

    # -------------------- serialization --------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [col.to_dict() for col in self.columns],
            "cards": [card.to_dict() for card in self.cards],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Board:
        return cls(
            name=str(data["name"]),
            columns=[Column.from_dict(col) for col in data.get("columns") or []],
            cards=[Card.from_dict(card) for card in data.get("cards") or []],
        )


@dataclass
class RepoConfig:
    """Per-repository configuration stored in ``.tackboard/config.json``."""

    version: str = CONFIG_VERSION
    default_board: str = DEFAULT_BOARD_NAME
    tui_poll_seconds: float = 0.1
    tui_min_terminal_cols: int = 60
    tui_min_terminal_rows: int = 12

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "default_board": self.default_board,
            "tui_poll_seconds": self.tui_poll_seconds,
            "tui_min_terminal_cols": self.tui_min_terminal_cols,
            "tui_min_terminal_rows": self.tui_min_terminal_rows,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> RepoConfig:
        """Create a RepoConfig from a raw dictionary, validating terminal settings."""
        try:
            tui_poll_seconds = float(payload.get("tui_poll_seconds", 0.1))
            tui_min_terminal_cols = int(payload.get("tui_min_terminal_cols", 60))
            tui_min_terminal_rows = int(payload.get("tui_min_terminal_rows", 12))
        except (TypeError, ValueError) as err:
            raise ConfigError(f"Invalid terminal setting: {err}") from err

        if tui_poll_seconds <= 0:
            raise ConfigError(f"tui_poll_seconds must be positive, got {tui_poll_seconds}")
        if tui_min_terminal_cols <= 0:
            raise ConfigError(
                f"tui_min_terminal_cols must be positive, got {tui_min_terminal_cols}"
            )
        if tui_min_terminal_rows <= 0:
            raise ConfigError(
                f"tui_min_terminal_rows must be positive, got {tui_min_terminal_rows}"
            )

        return cls(
            version=str(payload.get("version", CONFIG_VERSION)),
            default_board=str(payload.get("default_board", DEFAULT_BOARD_NAME)),
            tui_poll_seconds=tui_poll_seconds,
            tui_min_terminal_cols=tui_min_terminal_cols,
            tui_min_terminal_rows=tui_min_terminal_rows,
        )
