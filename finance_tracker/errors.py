"""Exception types shared across the tracker."""

from typing import Optional


class TrackerError(Exception):
    """Base exception for the finance tracker."""
    pass


class ImportRejectedError(TrackerError):
    """
    An import file was refused as a whole.

    `invalid_count` is the number of records that failed validation,
    or 0 when the file was rejected before records were inspected.
    """

    def __init__(
        self,
        reason: str,
        invalid_count: int = 0,
        details: Optional[list[str]] = None,
    ):
        self.reason = reason
        self.invalid_count = invalid_count
        self.details = details or []
        super().__init__(reason)
