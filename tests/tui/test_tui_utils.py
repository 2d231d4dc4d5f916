"""Unit tests for TUI utility functions."""

from unittest.mock import patch

from tackboard.tui.tui_utils import format_card_line, get_terminal_size, truncate_text


class TestTruncateText:
    """Tests for truncate_text function."""

    def test_short_text(self):
        """Test text shorter than max_len is returned as-is."""
        assert truncate_text("short", 10) == "short"

    def test_exact_length(self):
        """Test text at max_len is returned as-is."""
        assert truncate_text("1234567890", 10) == "1234567890"

    def test_long_text(self):
        """Test long text gets an ellipsis."""
        assert truncate_text("this is a long text", 10) == "this is..."

    def test_tiny_max_len(self):
        """Test max_len of 3 or less returns dots only."""
        assert truncate_text("abcdef", 2) == ".."

    def test_zero_max_len(self):
        """Test zero max_len returns empty string."""
        assert truncate_text("abc", 0) == ""


class TestFormatCardLine:
    """Tests for format_card_line function."""

    def test_title_only(self):
        assert format_card_line("Write docs", [], None) == "Write docs"

    def test_labels_and_assignee(self):
        assert format_card_line("Fix login", ["bug", "p1"], "sam") == "Fix login [bug,p1] @sam"

    def test_assignee_only(self):
        assert format_card_line("Deploy", [], "alex") == "Deploy @alex"


class TestGetTerminalSize:
    """Tests for get_terminal_size function."""

    def test_returns_tuple(self):
        """Test result is a pair of positive ints."""
        columns, rows = get_terminal_size()
        assert columns > 0
        assert rows > 0

    def test_fallback_on_error(self):
        """Test OSError falls back to 80x24."""
        with patch("tackboard.tui.tui_utils.shutil.get_terminal_size", side_effect=OSError):
            assert get_terminal_size() == (80, 24)
