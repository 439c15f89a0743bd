"""
Form Validation

Decides whether a set of form values may become a TransactionRecord.

Every field is checked independently:
- Description: required, 3-50 characters, no leading/trailing/double
  spaces, no markup characters, no significant word used twice
- Amount: required, plain decimal with at most 2 places, 0 < amount <= 1,000,000.
  Already-parsed numbers (from an import file) are checked by value.
- Date: required, YYYY-MM-DD, year 2000 or later, not in the future
- Category: required, one of the fixed categories

`validate_form` runs all four checks (no short-circuit) and reports a
message for every field that failed.

IMPORTANT: Validation NEVER fixes input. It only reports.
All functions here are pure: same input, same answer, no side effects.
"""

import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from finance_tracker.models.record import Category, FieldValidation, FormValidation


MAX_AMOUNT = Decimal("1000000")
MIN_YEAR = 2000
DESCRIPTION_MIN_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 50

PATTERNS = {
    # One non-space at each end, never two whitespace characters in a row
    "description": re.compile(r"\S(?:(?!\s{2})[\s\S])*\S|\S"),
    "markup": re.compile(r"[<>{}]"),
    # A word of 4+ letters that shows up again later in the text
    "duplicate_word": re.compile(
        r"\b([^\W\d_]{4,})\b(?=.*\b\1\b)",
        re.IGNORECASE | re.DOTALL,
    ),
    "amount": re.compile(r"(0|[1-9]\d*)(\.\d{1,2})?"),
    "date": re.compile(r"\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])"),
}

FORM_FIELDS = ("description", "amount", "date", "category")


def _ok() -> FieldValidation:
    return FieldValidation(is_valid=True)


def _fail(message: str) -> FieldValidation:
    return FieldValidation(is_valid=False, message=message)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def get_categories() -> list[str]:
    """Category names in display order."""
    return [category.value for category in Category]


def validate_description(value: Any) -> FieldValidation:
    if _is_blank(value) or not isinstance(value, str):
        return _fail("Description is required.")

    length = len(value.strip())
    if length < DESCRIPTION_MIN_LENGTH:
        return _fail("Description must be at least 3 characters.")
    if length > DESCRIPTION_MAX_LENGTH:
        return _fail("Description must be 50 characters or fewer.")

    if not PATTERNS["description"].fullmatch(value):
        return _fail(
            "Description cannot start or end with a space, "
            "or contain consecutive spaces."
        )
    if PATTERNS["markup"].search(value):
        return _fail("Description cannot contain <, >, { or }.")
    if PATTERNS["duplicate_word"].search(value):
        return _fail("Description contains a repeated word. Try being more specific.")

    return _ok()


def validate_amount(value: Any) -> FieldValidation:
    if _is_blank(value) or isinstance(value, bool):
        return _fail("Amount is required.")

    if isinstance(value, (int, float, Decimal)):
        # Parsed numbers are judged by value, not by how they were written
        amount = coerce_amount(value)
        if amount is None or amount.normalize().as_tuple().exponent < -2:
            return _fail("Amount must be a positive number with up to 2 decimal places.")
    else:
        raw = str(value).strip()
        if not PATTERNS["amount"].fullmatch(raw):
            return _fail("Amount must be a positive number with up to 2 decimal places.")
        amount = Decimal(raw)

    if amount <= 0:
        return _fail("Amount must be greater than 0.")
    if amount > MAX_AMOUNT:
        return _fail("Amount cannot exceed 1,000,000.")

    return _ok()


def parse_local_date(value: str) -> date:
    """
    Parse YYYY-MM-DD as a local calendar date.

    Raises ValueError for dates that do not exist (e.g. 2023-02-30).
    """
    year, month, day = (int(part) for part in value.split("-"))
    return date(year, month, day)


def validate_date(value: Any, today: Optional[date] = None) -> FieldValidation:
    """
    Check a transaction date.

    Args:
        value: YYYY-MM-DD string (a date object is accepted too)
        today: Reference day for the future-date rule. Defaults to the
               local calendar day.
    """
    if isinstance(value, date):
        value = value.isoformat()
    if _is_blank(value) or not isinstance(value, str):
        return _fail("Date is required.")

    if not PATTERNS["date"].fullmatch(value):
        return _fail("Date must be in YYYY-MM-DD format.")

    if int(value[:4]) < MIN_YEAR:
        return _fail("Date must be from the year 2000 or later.")

    try:
        parsed = parse_local_date(value)
    except ValueError:
        return _fail("Date is not a real calendar date.")

    if parsed > (today or date.today()):
        return _fail("Date cannot be in the future.")

    return _ok()


def validate_category(value: Any) -> FieldValidation:
    if isinstance(value, Category):
        value = value.value
    if _is_blank(value):
        return _fail("Please select a category.")
    if value not in get_categories():
        return _fail("Please select a valid category.")
    return _ok()


def validate_form(
    form_data: Mapping[str, Any],
    today: Optional[date] = None,
) -> FormValidation:
    """
    Validate every form field and aggregate the result.

    Returns:
        FormValidation with is_valid=True and no errors, or is_valid=False
        and one message per failing field.
    """
    results = {
        "description": validate_description(form_data.get("description")),
        "amount": validate_amount(form_data.get("amount")),
        "date": validate_date(form_data.get("date"), today=today),
        "category": validate_category(form_data.get("category")),
    }

    errors = {
        field: result.message
        for field, result in results.items()
        if not result.is_valid
    }

    return FormValidation(is_valid=not errors, errors=errors)


def validate_imported_record(
    data: Any,
    today: Optional[date] = None,
) -> list[str]:
    """
    Check one record from an import file.

    Applies the same field rules as manual entry, plus the requirement
    that the record carries an id. Returns a list of problems, empty
    when the record is acceptable.
    """
    if not isinstance(data, Mapping):
        return ["Record is not an object."]

    problems = []

    record_id = data.get("id")
    if not isinstance(record_id, str) or not record_id.strip():
        problems.append("Record id is required.")

    form = validate_form(data, today=today)
    problems.extend(f"{field}: {message}" for field, message in form.errors.items())

    return problems


def coerce_amount(value: Any) -> Optional[Decimal]:
    """
    Convert a user or file supplied amount to Decimal.

    Returns None when the value is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount
