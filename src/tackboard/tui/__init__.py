"""Interactive terminal board: engine, projection and rich views."""

from .effects import Transition
from .engine import BoardEngine
from .keys import KeyEvent
from .state import ConfirmAction, Mode, UIState

__all__ = [
    "BoardEngine",
    "ConfirmAction",
    "KeyEvent",
    "Mode",
    "Transition",
    "UIState",
]
