"""Local-first kanban boards stored alongside a repository."""

__version__ = "0.1.0"
