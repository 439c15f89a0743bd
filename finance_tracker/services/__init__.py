"""Services package."""

from finance_tracker.services.storage import (
    CorruptDataError,
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
    StorageInterface,
    StorageUnavailableError,
)

__all__ = [
    # Storage services
    "CorruptDataError",
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageError",
    "StorageInterface",
    "StorageUnavailableError",
]
