"""Errors raised by the task store.

All of them are recoverable: the CLI reports the message inline and keeps
the board running.
"""


class KanbanError(Exception):
    """Base class for board errors."""


class ValidationError(KanbanError):
    """Rejected input: empty title, unknown priority, bad patch field."""


class NotFoundError(KanbanError):
    """No task with the given id (or id prefix)."""


class InvalidColumnError(KanbanError):
    """Column id outside the fixed column set."""
