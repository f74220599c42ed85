"""Exception hierarchy for the training store and its callers."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all load_store errors."""


class NotFoundError(StoreError):
    """A plan, plan day or event id does not exist. No mutation was made."""

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class ConflictError(StoreError):
    """The requested write conflicts with the stored state."""


class LoadOrderError(ConflictError):
    """A DailyLoad update is not for the day after the latest known day."""


class ConcurrentExtensionError(ConflictError):
    """Another extension of the same athlete's load history is in flight."""

    def __init__(self, athlete_id: str) -> None:
        super().__init__(f"Load history extension already running for {athlete_id}")
        self.athlete_id = athlete_id


class InvalidTransitionError(ConflictError):
    """A plan or plan-day state change is not allowed from its current state."""

    def __init__(self, message: str, current_status: str | None = None) -> None:
        super().__init__(message)
        self.current_status = current_status
