"""Tests for board data models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tackboard.errors import ConfigError
from tackboard.models import (
    Board,
    Card,
    Column,
    RepoConfig,
    format_timestamp,
    parse_timestamp,
)

T0 = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


def _card(card_id: str, column: str, order: int, archived: bool = False, title: str = "") -> Card:
    return Card(
        id=card_id,
        title=title or card_id,
        column=column,
        order=order,
        created_at=T0,
        updated_at=T0,
        archived=archived,
    )


@pytest.fixture
def board() -> Board:
    """Board with cards out of order and one archived card."""
    b = Board.default_board()
    b.cards = [
        _card("c", "todo", 2),
        _card("a", "todo", 0),
        _card("x", "todo", 1, archived=True),
        _card("b", "todo", 1),
        _card("d", "doing", 0),
    ]
    return b


class TestTimestamps:
    """Tests for timestamp formatting and parsing."""

    def test_format_uses_z_suffix(self) -> None:
        assert format_timestamp(T0) == "2025-03-01T12:00:00Z"

    def test_parse_z_suffix(self) -> None:
        assert parse_timestamp("2025-03-01T12:00:00Z") == T0

    def test_parse_nanosecond_precision(self) -> None:
        """Fractions longer than microseconds are truncated."""
        parsed = parse_timestamp("2025-03-01T12:00:00.123456789Z")
        assert parsed.microsecond == 123456
        assert parsed.tzinfo is not None

    def test_parse_naive_is_utc(self) -> None:
        assert parse_timestamp("2025-03-01T12:00:00") == T0

    def test_parse_offset_converted_to_utc(self) -> None:
        assert parse_timestamp("2025-03-01T14:00:00+02:00") == T0


class TestCard:
    """Tests for Card construction and serialization."""

    def test_new_card_has_id_and_equal_timestamps(self) -> None:
        card = Card.new("Write docs", "todo")
        assert len(card.id) == 26
        assert card.created_at == card.updated_at
        assert card.labels == []
        assert card.archived is False

    def test_new_cards_have_distinct_ids(self) -> None:
        ids = {Card.new("t", "todo").id for _ in range(50)}
        assert len(ids) == 50

    def test_touch_updates_only_updated_at(self) -> None:
        card = _card("a", "todo", 0)
        card.touch()
        assert card.created_at == T0
        assert card.updated_at > T0

    def test_to_dict_omits_absent_optionals(self) -> None:
        data = _card("a", "todo", 0).to_dict()
        assert "description" not in data
        assert "assignee" not in data
        assert "due" not in data
        assert data["labels"] == []
        assert data["metadata"] == {}
        assert data["archived"] is False
        assert data["created_at"] == "2025-03-01T12:00:00Z"

    def test_to_dict_includes_present_optionals(self) -> None:
        card = _card("a", "todo", 0)
        card.description = "details"
        card.assignee = "sam"
        card.due = T0
        data = card.to_dict()
        assert data["description"] == "details"
        assert data["assignee"] == "sam"
        assert data["due"] == "2025-03-01T12:00:00Z"

    def test_from_dict_defaults_missing_fields(self) -> None:
        card = Card.from_dict(
            {
                "id": "a",
                "title": "Task",
                "column": "todo",
                "order": 3,
                "created_at": "2025-03-01T12:00:00Z",
                "updated_at": "2025-03-01T12:00:00Z",
            }
        )
        assert card.labels == []
        assert card.metadata == {}
        assert card.archived is False
        assert card.due is None
        assert card.order == 3

    def test_from_dict_preserves_metadata(self) -> None:
        card = _card("a", "todo", 0)
        card.metadata = {"source": "import", "points": 3}
        restored = Card.from_dict(card.to_dict())
        assert restored == card

    def test_from_dict_missing_required_field_raises(self) -> None:
        with pytest.raises(KeyError):
            Card.from_dict({"id": "a", "title": "t", "column": "todo"})


class TestColumn:
    """Tests for Column serialization."""

    def test_wip_limit_omitted_when_absent(self) -> None:
        assert Column("todo").to_dict() == {"name": "todo"}

    def test_wip_limit_roundtrip(self) -> None:
        column = Column.from_dict({"name": "doing", "wip_limit": 2})
        assert column == Column("doing", 2)
        assert column.to_dict() == {"name": "doing", "wip_limit": 2}


class TestBoardQueries:
    """Tests for board lookups and ordering."""

    def test_default_board_columns(self) -> None:
        b = Board.default_board("work")
        assert b.name == "work"
        assert [c.name for c in b.columns] == ["todo", "doing", "done"]
        assert b.cards == []

    def test_column_cards_sorted_and_exclude_archived(self, board: Board) -> None:
        assert [c.id for c in board.column_cards("todo")] == ["a", "b", "c"]

    def test_active_cards_sorted_by_order_stable(self, board: Board) -> None:
        """Equal orders keep their storage order."""
        assert [c.id for c in board.active_cards()] == ["a", "d", "b", "c"]

    def test_wip_count_excludes_archived(self, board: Board) -> None:
        assert board.wip_count("todo") == 3
        assert board.wip_count("done") == 0

    def test_next_order(self, board: Board) -> None:
        assert board.next_order("todo") == 3
        assert board.next_order("done") == 0

    def test_has_column(self, board: Board) -> None:
        assert board.has_column("done")
        assert not board.has_column("missing")

    def test_find(self, board: Board) -> None:
        card = board.find("b")
        assert card is not None and card.id == "b"
        assert board.find("missing") is None

    def test_find_mut_returns_same_object(self, board: Board) -> None:
        card = board.find_mut("b")
        assert card is board.find("b")

    def test_find_card_by_number(self, board: Board) -> None:
        first = board.find_card_by_number(1)
        assert first is not None and first.id == "a"
        assert board.find_card_by_number(0) is None
        assert board.find_card_by_number(5) is None

    def test_resolve_number_and_id(self, board: Board) -> None:
        assert board.resolve("2") == "d"
        assert board.resolve("c") == "c"
        assert board.resolve("99") is None
        assert board.resolve("nope") is None

    def test_resolve_number_spans_columns(self, board: Board) -> None:
        """Card "d" is first in doing but second on the board."""
        assert board.column_cards("doing")[0].id == "d"
        assert board.resolve("1") == "a"
        assert board.resolve("2") == "d"

    def test_resolve_never_returns_archived_by_number(self, board: Board) -> None:
        resolved = {board.resolve(str(n)) for n in range(1, 5)}
        assert "x" not in resolved


class TestBoardSerialization:
    """Tests for whole-board documents."""

    def test_roundtrip(self, board: Board) -> None:
        board.columns[1].wip_limit = 2
        assert Board.from_dict(board.to_dict()) == board

    def test_from_dict_tolerates_missing_lists(self) -> None:
        b = Board.from_dict({"name": "empty"})
        assert b.columns == []
        assert b.cards == []


class TestRepoConfig:
    """Tests for configuration validation."""

    def test_defaults(self) -> None:
        config = RepoConfig.from_dict({})
        assert config.version == "0.1.0"
        assert config.default_board == "default"
        assert config.tui_poll_seconds == 0.1

    def test_roundtrip(self) -> None:
        config = RepoConfig(default_board="work", tui_min_terminal_cols=100)
        assert RepoConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize(
        "field,value",
        [
            ("tui_poll_seconds", 0),
            ("tui_poll_seconds", -1),
            ("tui_min_terminal_cols", 0),
            ("tui_min_terminal_rows", -5),
            ("tui_min_terminal_cols", "wide"),
        ],
    )
    def test_invalid_terminal_settings(self, field: str, value: object) -> None:
        with pytest.raises(ConfigError):
            RepoConfig.from_dict({field: value})
