"""Persistence boundary for the training load engine."""

from load_store.exceptions import (
    ConcurrentExtensionError,
    ConflictError,
    InvalidTransitionError,
    LoadOrderError,
    NotFoundError,
    StoreError,
)
from load_store.memory import InMemoryRepository
from load_store.repository import TrainingRepository

__all__ = [
    "ConcurrentExtensionError",
    "ConflictError",
    "InMemoryRepository",
    "InvalidTransitionError",
    "LoadOrderError",
    "NotFoundError",
    "StoreError",
    "TrainingRepository",
]
