"""
Dashboard Summary

Pure read-side aggregation over a RecordStore. Nothing here mutates the
store.

IMPORTANT: Budget arithmetic stays in Decimal. A total of 0.10 + 0.20
must compare equal to a cap of 0.30.
"""

from decimal import ROUND_HALF_UP, Decimal

from finance_tracker.models.record import (
    BudgetStatus,
    ConvertedTotal,
    DashboardSummary,
    UserSettings,
)
from finance_tracker.store.record_store import RecordStore


CENT = Decimal("0.01")


def budget_status(total_spent: Decimal, budget_cap: Decimal) -> BudgetStatus:
    """
    Compare spending against the cap.

    Spending exactly the cap is NOT over budget.
    """
    if total_spent > budget_cap:
        return BudgetStatus(
            is_over_budget=True,
            total_spent=total_spent,
            budget_cap=budget_cap,
            overage=total_spent - budget_cap,
        )
    return BudgetStatus(
        is_over_budget=False,
        total_spent=total_spent,
        budget_cap=budget_cap,
        remaining=budget_cap - total_spent,
    )


def convert_total(total: Decimal, rate: float) -> Decimal:
    """Convert a base-currency amount, rounded to cents."""
    return (total * Decimal(str(rate))).quantize(CENT, rounding=ROUND_HALF_UP)


def converted_totals(total: Decimal, settings: UserSettings) -> list[ConvertedTotal]:
    """One entry per secondary currency slot, even when two slots share a code."""
    return [
        ConvertedTotal(slot=slot, code=entry.code, total=convert_total(total, entry.rate))
        for slot, entry in (("currency2", settings.currency2), ("currency3", settings.currency3))
    ]


def build_dashboard(store: RecordStore, recent_days: int = 7) -> DashboardSummary:
    """Collect every figure the dashboard panel shows."""
    total = store.get_total_spent()
    settings = store.get_settings()

    return DashboardSummary(
        total_spent=total,
        top_category=store.get_top_category(),
        total_count=store.get_record_count(),
        budget_cap=settings.budget_cap,
        settings=settings,
        last_7_days_records=store.get_records_in_last_days(recent_days),
        budget_status=budget_status(total, settings.budget_cap),
        converted_totals=converted_totals(total, settings),
    )
