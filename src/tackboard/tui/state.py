"""UI state for the interactive board engine.

Everything here is UI-only: selection, text buffers, pending key
sequences and the current mode. The board itself lives on the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Mode(Enum):
    """Interaction modes."""

    NORMAL = "normal"
    INSERT = "insert"
    SEARCH = "search"
    HELP = "help"
    CONFIRM = "confirm"
    BOARD_PICKER = "board_picker"

    @property
    def label(self) -> str:
        """Short indicator shown in the status bar."""
        return _MODE_LABELS[self]


_MODE_LABELS = {
    Mode.NORMAL: "NORMAL",
    Mode.INSERT: "INSERT",
    Mode.SEARCH: "SEARCH",
    Mode.HELP: "HELP",
    Mode.CONFIRM: "CONFIRM",
    Mode.BOARD_PICKER: "BOARDS",
}


class ConfirmAction(Enum):
    """Destructive actions awaiting a yes/no answer."""

    DELETE = "delete"


@dataclass
class UIState:
    """Mutable UI state owned by one interactive session."""

    mode: Mode = Mode.NORMAL
    selected_col: int = 0
    selected_row: int = 0
    input_buf: str = ""
    search_buf: str = ""
    search_active: bool = False
    message: str | None = None
    pending_confirm: ConfirmAction | None = None
    pending_g: bool = False
    board_list: list[str] = field(default_factory=list)
    board_selected: int = 0
    should_quit: bool = False

    def clear_search(self) -> None:
        self.search_active = False
        self.search_buf = ""
