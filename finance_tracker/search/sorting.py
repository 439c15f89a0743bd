"""
Record sorting.

Sorting is stable: records that compare equal keep their relative order
in both directions.
"""

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel

from finance_tracker.models.record import TransactionRecord


class SortField(str, Enum):
    DATE = "date"
    DESCRIPTION = "description"
    AMOUNT = "amount"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


SORT_KEYS = {
    SortField.DATE: lambda record: record.date,
    SortField.DESCRIPTION: lambda record: record.description.lower(),
    SortField.AMOUNT: lambda record: record.amount,
}


class SortState(BaseModel):
    """
    Current table ordering.

    Starts newest first. Choosing the active field again flips the
    direction; choosing another field switches to it ascending.
    """

    field: SortField = SortField.DATE
    direction: SortDirection = SortDirection.DESC

    def toggled(self, field: SortField) -> "SortState":
        field = SortField(field)
        if field == self.field:
            flipped = (
                SortDirection.DESC
                if self.direction == SortDirection.ASC
                else SortDirection.ASC
            )
            return SortState(field=field, direction=flipped)
        return SortState(field=field, direction=SortDirection.ASC)


def sort_records(
    records: Sequence[TransactionRecord],
    field: SortField = SortField.DATE,
    direction: SortDirection = SortDirection.DESC,
) -> list[TransactionRecord]:
    """Return a new list ordered by `field`."""
    key = SORT_KEYS[SortField(field)]
    return sorted(
        records,
        key=key,
        reverse=SortDirection(direction) == SortDirection.DESC,
    )
