from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .transitions import TransitionOutcome


class TaskflowError(Exception):
    pass


class NotFoundError(TaskflowError):
    pass


class BadRequestError(TaskflowError):
    def __init__(self, message: str, outcome: TransitionOutcome | None = None) -> None:
        super().__init__(message)
        self.outcome = outcome


class AuthError(TaskflowError):
    """Missing or unresolvable caller identity. Points at misconfiguration, not user input."""
