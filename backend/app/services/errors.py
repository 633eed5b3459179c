"""Exceptions raised by planner services and mapped to HTTP errors by the routes."""
from __future__ import annotations


class ProfileNotFoundError(LookupError):
    """The user has not completed the profile wizard yet."""


class TaskNotFoundError(LookupError):
    pass


class BlockNotFoundError(LookupError):
    pass


class OwnershipError(PermissionError):
    """The resource exists but belongs to another user."""


class BlockConflictError(ValueError):
    def __init__(self, reason: str, *, conflicting_label: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.conflicting_label = conflicting_label


class GoalNotFoundError(LookupError):
    pass


class DuplicateGoalError(ValueError):
    """A goal with the same name (ignoring case) already exists for the user."""
