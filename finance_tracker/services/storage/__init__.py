"""
Storage Services Package

Provides the abstract storage interface and its implementations:
a JSON file on local disk, and an in-memory blob for tests and fallback.
"""

from finance_tracker.services.storage.interface import (
    STORAGE_VERSION,
    CorruptDataError,
    StorageError,
    StorageInterface,
    StorageUnavailableError,
)
from finance_tracker.services.storage.json_file import JsonFileStorage
from finance_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "STORAGE_VERSION",
    "StorageInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
