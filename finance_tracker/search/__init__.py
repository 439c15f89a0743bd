"""Search, highlight and sort over transaction records."""

from finance_tracker.search.search import (
    compile_pattern,
    highlight_text,
    is_valid_pattern,
    search_records,
)
from finance_tracker.search.sorting import (
    SortDirection,
    SortField,
    SortState,
    sort_records,
)

__all__ = [
    "SortDirection",
    "SortField",
    "SortState",
    "compile_pattern",
    "highlight_text",
    "is_valid_pattern",
    "search_records",
    "sort_records",
]
