"""Side effects produced by engine transitions.

Effects are not a pure reducer output. Transition methods mutate the model
themselves: card edits go straight to the in-memory board through
``operations`` and selection changes go straight to the view state, all
before the method returns. Only the work that follows is described here and
applied by the engine in order:

* ``SaveBoard``, ``ReloadBoard``, ``OpenBoardPicker`` and ``SwitchBoard``
  call the gateway.
* ``SetMessage`` updates the status bar.
* ``Quit`` ends the session.

A failed ``SaveBoard`` therefore leaves the mutation in memory; the engine
reports the failure and the next successful save writes it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .state import Mode


@dataclass(frozen=True)
class SetMessage:
    """Replace the status message (None clears it)."""

    text: str | None


@dataclass(frozen=True)
class SaveBoard:
    """Persist the whole board; show ``success_message`` if the write succeeds."""

    success_message: str | None = None


@dataclass(frozen=True)
class ReloadBoard:
    """Re-read the configuration and the active board from storage."""


@dataclass(frozen=True)
class OpenBoardPicker:
    """List available boards and enter the board picker."""


@dataclass(frozen=True)
class SwitchBoard:
    """Make ``name`` the active board and load it."""

    name: str


@dataclass(frozen=True)
class Quit:
    """Stop the interactive session."""


Effect = SetMessage | SaveBoard | ReloadBoard | OpenBoardPicker | SwitchBoard | Quit


@dataclass(frozen=True)
class Transition:
    """Result of handling one key: the next mode plus effects to apply."""

    mode: Mode
    effects: tuple[Effect, ...] = ()

    def has_effect(self, effect_type: type) -> bool:
        return any(isinstance(effect, effect_type) for effect in self.effects)
