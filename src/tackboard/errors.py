"""Custom exceptions for board operations.

This module defines a hierarchy of exceptions for the different failure
scenarios of the store and the board operations, so front ends can turn
them into specific messages.
"""


class TackboardError(Exception):
    """Base exception for all tackboard errors."""


class NotInitializedError(TackboardError):
    """Raised when no board storage exists for the repository."""

    def __init__(self) -> None:
        super().__init__("Not a tackboard project. Run `tackboard init` first.")


class AlreadyInitializedError(TackboardError):
    """Raised when initializing a repository that already has board storage."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Already initialized at {path}")
        self.path = path


class BoardNotFoundError(TackboardError):
    """Raised when no document exists for a board name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Board not found: {name}")
        self.name = name


class BoardExistsError(TackboardError):
    """Raised when creating a board whose document already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Board already exists: {name}")
        self.name = name


class CardNotFoundError(TackboardError):
    """Raised when a card id or position does not resolve."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Card not found: {token}")
        self.token = token


class ColumnNotFoundError(TackboardError):
    """Raised when a column name is not part of the board."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Column not found: {name}")
        self.name = name


class LabelNotFoundError(TackboardError):
    """Raised when removing a label the card does not carry."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Label not found on card: {label}")
        self.label = label


class InvalidNameError(TackboardError):
    """Raised when a board name cannot be used as a file name."""


class StorageError(TackboardError):
    """Raised when reading or writing a document fails (file I/O, decoding)."""


class ConfigError(TackboardError):
    """Raised when configuration is invalid or cannot be loaded."""
