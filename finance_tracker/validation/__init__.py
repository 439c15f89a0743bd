"""Form validation package."""

from finance_tracker.validation.validator import (
    PATTERNS,
    coerce_amount,
    get_categories,
    parse_local_date,
    validate_amount,
    validate_category,
    validate_date,
    validate_description,
    validate_form,
    validate_imported_record,
)

__all__ = [
    "PATTERNS",
    "coerce_amount",
    "get_categories",
    "parse_local_date",
    "validate_amount",
    "validate_category",
    "validate_date",
    "validate_description",
    "validate_form",
    "validate_imported_record",
]
