"""Interactive board engine.

This module maps key events to board mutations, mode changes and status
messages. Each mode has one transition method returning a Transition (the
next mode plus effects); ``handle_key`` applies it. Gateway failures are
turned into status messages and never escape a key-handling step.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .. import operations
from ..errors import TackboardError
from ..models import Board, Card
from ..store import BoardGateway
from . import keys
from .effects import (
    Effect,
    OpenBoardPicker,
    Quit,
    ReloadBoard,
    SaveBoard,
    SetMessage,
    SwitchBoard,
    Transition,
)
from .keys import KeyEvent
from .projection import BoardView, project, visible_cards
from .state import ConfirmAction, Mode, UIState

logger = logging.getLogger(__name__)

INSERT_PROMPT = "Add card (Enter to save, Esc to cancel):"
CONFIRM_DELETE_PROMPT = "Delete this card? (y/n)"
SEARCH_PROMPT = "Search:"
PICKER_PROMPT = "Switch board (Enter to select, Esc to cancel):"

HELP_DISMISS_KEYS = frozenset({keys.ESC, "q", "?"})


class BoardEngine:
    """Owns one loaded board plus UI state and interprets key events."""

    def __init__(self, gateway: BoardGateway, board: Board, state: UIState | None = None) -> None:
        """Initialize the engine.

        Args:
            gateway: Storage used to persist every mutation
            board: The active board, already loaded
            state: Initial UI state (a fresh Normal-mode state when None)
        """
        self.gateway = gateway
        self.board = board
        self.state = state if state is not None else UIState()
        self._handlers: dict[Mode, Callable[[KeyEvent], Transition]] = {
            Mode.NORMAL: self._handle_normal,
            Mode.INSERT: self._handle_insert,
            Mode.SEARCH: self._handle_search,
            Mode.HELP: self._handle_help,
            Mode.CONFIRM: self._handle_confirm,
            Mode.BOARD_PICKER: self._handle_board_picker,
        }

    @classmethod
    def from_gateway(cls, gateway: BoardGateway) -> BoardEngine:
        """Create an engine for the repository's active board.

        Raises:
            TackboardError: If the configuration or the board cannot be loaded
                (including NotInitializedError before ``init``).
        """
        config = gateway.load_config()
        board = gateway.load_board(config.default_board)
        return cls(gateway, board)

    # -------------------- queries --------------------

    @property
    def mode(self) -> Mode:
        return self.state.mode

    def column_name(self, index: int | None = None) -> str | None:
        """Name of the column at ``index`` (the selected column by default)."""
        if index is None:
            index = self.state.selected_col
        if 0 <= index < len(self.board.columns):
            return self.board.columns[index].name
        return None

    def column_cards(self, index: int | None = None) -> list[Card]:
        """Visible (filtered, ordered) cards of a column."""
        name = self.column_name(index)
        if name is None:
            return []
        return visible_cards(self.board, name, self.state.search_buf, self.state.search_active)

    def current_card(self) -> Card | None:
        cards = self.column_cards()
        if 0 <= self.state.selected_row < len(cards):
            return cards[self.state.selected_row]
        return None

    def view(self) -> BoardView:
        return project(self.board, self.state)

    def _clamp_row(self) -> None:
        count = len(self.column_cards())
        if count == 0:
            self.state.selected_row = 0
        elif self.state.selected_row >= count:
            self.state.selected_row = count - 1

    def _clamp_col(self) -> None:
        last = max(len(self.board.columns) - 1, 0)
        if self.state.selected_col > last:
            self.state.selected_col = last

    # -------------------- dispatch --------------------

    def handle_key(self, event: KeyEvent) -> Transition:
        """Process one key event and apply the resulting transition.

        Ctrl+C quits from every mode before any mode-specific handling.

        Args:
            event: Key press to interpret

        Returns:
            The applied transition
        """
        if event.ctrl and event.key == "c":
            transition = Transition(self.state.mode, (Quit(),))
        else:
            transition = self._handlers[self.state.mode](event)
        self.apply(transition)
        return transition

    def apply(self, transition: Transition) -> None:
        """Enter the transition's mode and apply its effects in order."""
        self.state.mode = transition.mode
        for effect in transition.effects:
            self._apply_effect(effect)

    def _apply_effect(self, effect: Effect) -> None:
        if isinstance(effect, SetMessage):
            self.state.message = effect.text
        elif isinstance(effect, SaveBoard):
            self._save_board(effect.success_message)
        elif isinstance(effect, ReloadBoard):
            self._reload_board()
        elif isinstance(effect, OpenBoardPicker):
            self._open_board_picker()
        elif isinstance(effect, SwitchBoard):
            self._switch_board(effect.name)
        elif isinstance(effect, Quit):
            self.state.should_quit = True
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    # -------------------- Normal mode --------------------

    def _handle_normal(self, event: KeyEvent) -> Transition:
        state = self.state
        pending_g = state.pending_g
        state.pending_g = False
        stay = Transition(Mode.NORMAL)

        if event.ctrl:
            return stay
        k = event.key

        if k == "q":
            return Transition(Mode.NORMAL, (Quit(),))

        # Navigation
        if k in ("j", keys.DOWN):
            count = len(self.column_cards())
            if state.selected_row < count - 1:
                state.selected_row += 1
            return stay
        if k in ("k", keys.UP):
            if state.selected_row > 0:
                state.selected_row -= 1
            return stay
        if k in ("h", keys.LEFT):
            if state.selected_col > 0:
                state.selected_col -= 1
                self._clamp_row()
            return stay
        if k in ("l", keys.RIGHT):
            if state.selected_col < len(self.board.columns) - 1:
                state.selected_col += 1
                self._clamp_row()
            return stay
        if k == "g":
            if pending_g:
                state.selected_row = 0
            else:
                state.pending_g = True
            return stay
        if k == "G":
            count = len(self.column_cards())
            if count > 0:
                state.selected_row = count - 1
            return stay

        # Card actions
        if k == "a":
            if not self.board.columns:
                return Transition(Mode.NORMAL, (SetMessage("Board has no columns"),))
            state.input_buf = ""
            return Transition(Mode.INSERT, (SetMessage(INSERT_PROMPT),))
        if k == "d":
            if pending_g or self.current_card() is None:
                return stay
            state.pending_confirm = ConfirmAction.DELETE
            return Transition(Mode.CONFIRM, (SetMessage(CONFIRM_DELETE_PROMPT),))
        if k in ("L", ">"):
            return self._move_selected(1)
        if k in ("H", "<"):
            return self._move_selected(-1)
        if k == "K":
            return self._hoist_selected()
        if k == "J":
            return self._demote_selected()
        if k == "x":
            return self._archive_selected()

        # Modes and meta
        if k == "/":
            state.search_buf = ""
            state.search_active = True
            return Transition(Mode.SEARCH, (SetMessage(SEARCH_PROMPT),))
        if k == keys.ESC:
            state.clear_search()
            self._clamp_row()
            return Transition(Mode.NORMAL, (SetMessage(None),))
        if k == "?":
            return Transition(Mode.HELP)
        if k == "r":
            return Transition(Mode.NORMAL, (ReloadBoard(),))
        if k == "b":
            return Transition(Mode.NORMAL, (OpenBoardPicker(),))

        return stay

    def _move_selected(self, offset: int) -> Transition:
        """Move the selected card to the adjacent column (no-op at the edges)."""
        target = self.state.selected_col + offset
        destination = self.column_name(target) if target >= 0 else None
        card = self.current_card()
        if destination is None or card is None:
            return Transition(Mode.NORMAL)

        operations.move_card(self.board, card.id, destination)
        self._clamp_row()
        return Transition(Mode.NORMAL, (SaveBoard(f"Moved → {destination}"),))

    def _hoist_selected(self) -> Transition:
        card = self.current_card()
        if card is None:
            return Transition(Mode.NORMAL)

        operations.hoist_card(self.board, card.id)
        self.state.selected_row = 0
        return Transition(Mode.NORMAL, (SaveBoard("Hoisted to top."),))

    def _demote_selected(self) -> Transition:
        card = self.current_card()
        if card is None:
            return Transition(Mode.NORMAL)

        operations.demote_card(self.board, card.id)
        count = len(self.column_cards())
        if count > 0:
            self.state.selected_row = count - 1
        return Transition(Mode.NORMAL, (SaveBoard("Demoted to bottom."),))

    def _archive_selected(self) -> Transition:
        card = self.current_card()
        if card is None:
            return Transition(Mode.NORMAL)

        operations.archive_card(self.board, card.id)
        self._clamp_row()
        return Transition(Mode.NORMAL, (SaveBoard(f"Archived: {card.title}"),))

    # -------------------- Insert mode --------------------

    def _handle_insert(self, event: KeyEvent) -> Transition:
        state = self.state

        if event.key == keys.ESC and not event.ctrl:
            state.input_buf = ""
            return Transition(Mode.NORMAL, (SetMessage(None),))

        if event.key == keys.ENTER and not event.ctrl:
            title = state.input_buf
            state.input_buf = ""
            column = self.column_name()
            if not title or column is None:
                return Transition(Mode.NORMAL, (SetMessage(None),))

            operations.add_card(self.board, title, column)
            state.selected_row = max(len(self.column_cards()) - 1, 0)
            return Transition(Mode.NORMAL, (SaveBoard(f"Added: {title}"),))

        if event.key == keys.BACKSPACE and not event.ctrl:
            state.input_buf = state.input_buf[:-1]
        elif event.char is not None:
            state.input_buf += event.char
        return Transition(Mode.INSERT)

    # -------------------- Search mode --------------------

    def _handle_search(self, event: KeyEvent) -> Transition:
        state = self.state

        if event.key == keys.ESC and not event.ctrl:
            state.clear_search()
            self._clamp_row()
            return Transition(Mode.NORMAL, (SetMessage(None),))

        if event.key == keys.ENTER and not event.ctrl:
            state.selected_row = 0
            return Transition(Mode.NORMAL, (SetMessage(None),))

        if event.key == keys.BACKSPACE and not event.ctrl:
            state.search_buf = state.search_buf[:-1]
            state.selected_row = 0
        elif event.char is not None:
            state.search_buf += event.char
            state.selected_row = 0
        return Transition(Mode.SEARCH)

    # -------------------- Help mode --------------------

    def _handle_help(self, event: KeyEvent) -> Transition:
        if not event.ctrl and event.key in HELP_DISMISS_KEYS:
            return Transition(Mode.NORMAL)
        return Transition(Mode.HELP)

    # -------------------- Confirm mode --------------------

    def _handle_confirm(self, event: KeyEvent) -> Transition:
        action = self.state.pending_confirm
        self.state.pending_confirm = None

        if event.ctrl or event.key not in ("y", "Y") or action is None:
            return Transition(Mode.NORMAL, (SetMessage(None),))

        if action is ConfirmAction.DELETE:
            return self._delete_selected()
        return Transition(Mode.NORMAL, (SetMessage(None),))

    def _delete_selected(self) -> Transition:
        card = self.current_card()
        if card is None:
            return Transition(Mode.NORMAL, (SetMessage(None),))

        operations.delete_card(self.board, card.id)
        self._clamp_row()
        return Transition(Mode.NORMAL, (SaveBoard(f"Deleted: {card.title}"),))

    # -------------------- Board picker mode --------------------

    def _handle_board_picker(self, event: KeyEvent) -> Transition:
        state = self.state
        k = None if event.ctrl else event.key

        if k in (keys.ESC, "q"):
            return Transition(Mode.NORMAL, (SetMessage(None),))
        if k in ("j", keys.DOWN):
            if state.board_selected < len(state.board_list) - 1:
                state.board_selected += 1
            return Transition(Mode.BOARD_PICKER)
        if k in ("k", keys.UP):
            if state.board_selected > 0:
                state.board_selected -= 1
            return Transition(Mode.BOARD_PICKER)
        if k == keys.ENTER:
            if not 0 <= state.board_selected < len(state.board_list):
                return Transition(Mode.NORMAL, (SetMessage(None),))
            name = state.board_list[state.board_selected]
            if name == self.board.name:
                return Transition(Mode.NORMAL, (SetMessage(None),))
            return Transition(Mode.NORMAL, (SwitchBoard(name),))

        return Transition(Mode.BOARD_PICKER)

    # -------------------- gateway effects --------------------

    def _save_board(self, success_message: str | None) -> None:
        try:
            self.gateway.save_board(self.board)
        except (TackboardError, OSError) as err:
            logger.warning(f"Failed to save board {self.board.name}: {err}")
            self.state.message = f"Save failed: {err}"
            return
        if success_message is not None:
            self.state.message = success_message

    def _reload_board(self) -> None:
        try:
            config = self.gateway.load_config()
            board = self.gateway.load_board(config.default_board)
        except (TackboardError, OSError) as err:
            logger.warning(f"Failed to reload board: {err}")
            self.state.message = f"Reload failed: {err}"
            return
        self.board = board
        self._clamp_col()
        self._clamp_row()
        self.state.message = "Board reloaded."

    def _open_board_picker(self) -> None:
        try:
            boards = self.gateway.list_boards()
        except (TackboardError, OSError) as err:
            logger.warning(f"Failed to list boards: {err}")
            self.state.message = f"Failed to list boards: {err}"
            return
        self.state.board_list = list(boards)
        self.state.board_selected = (
            boards.index(self.board.name) if self.board.name in boards else 0
        )
        self.state.mode = Mode.BOARD_PICKER
        self.state.message = PICKER_PROMPT

    def _switch_board(self, name: str) -> None:
        """Load ``name`` and record it as the active board.

        The board is loaded before the configuration is written, so a failure
        at either step leaves both the session and the stored active board on
        the previous board.
        """
        try:
            board = self.gateway.load_board(name)
        except (TackboardError, OSError) as err:
            logger.warning(f"Failed to load board {name}: {err}")
            self.state.message = f"Load board failed: {err}"
            return

        try:
            config = self.gateway.load_config()
            config.default_board = name
            self.gateway.save_config(config)
        except (TackboardError, OSError) as err:
            logger.warning(f"Failed to save active board {name}: {err}")
            self.state.message = f"Save config failed: {err}"
            return

        self.board = board
        self.state.selected_col = 0
        self.state.selected_row = 0
        self.state.clear_search()
        self.state.message = f"Switched to board: {name}"
        logger.info(f"Switched to board {name}")
