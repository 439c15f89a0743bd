"""Dashboard aggregation."""

from finance_tracker.dashboard.summary import (
    budget_status,
    build_dashboard,
    convert_total,
    converted_totals,
)

__all__ = [
    "budget_status",
    "build_dashboard",
    "convert_total",
    "converted_totals",
]
