"""
Core Data Models for Finance Tracker

These models define the schemas for everything the RecordStore holds
and everything that crosses the storage or import/export boundary.

DESIGN DECISION: Wire names stay camelCase (createdAt, budgetCap) so files
written by earlier versions of the tracker load unchanged. Python code uses
snake_case attribute names; aliases bridge the two.

Field-level business rules (description style, future dates, repeated
words) live in the validation package. These models enforce the structural
floor: types, the category enumeration and amount bounds.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Supported transaction categories.

    The display order of the form dropdown follows declaration order.
    """
    FOOD = "Food"
    BOOKS = "Books"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    FEES = "Fees"
    OTHER = "Other"


# Decimals go out as JSON numbers, matching files produced by the tracker
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# TRANSACTION RECORD
# =============================================================================

class TransactionRecord(BaseModel):
    """
    A single transaction entry.

    CRITICAL: `id` and `created_at` are assigned once by the RecordStore
    and never change afterwards.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="What the money was spent on"
    )
    amount: Money = Field(
        ...,
        gt=0,
        le=1_000_000,
        description="Amount spent in the base currency"
    )
    category: Category = Field(
        ...,
        description="Spending category"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    created_at: dt.datetime = Field(
        ...,
        description="When the record was created"
    )
    updated_at: dt.datetime = Field(
        ...,
        description="When the record was last changed"
    )

    @field_validator("id", "description")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def to_wire(self) -> dict:
        """Serialize with camelCase keys and JSON-native values."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# SETTINGS
# =============================================================================

class CurrencyEntry(BaseModel):
    """A secondary currency and its conversion rate from the base currency."""

    code: str = Field(
        ...,
        min_length=1,
        max_length=3,
        description="Currency code, e.g. EUR"
    )
    rate: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Units of this currency per one unit of base currency"
    )


class UserSettings(BaseModel):
    """
    User preferences that persist alongside the records.

    The in-progress edit marker is NOT part of this model. It is
    transient session state held by the RecordStore.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    budget_cap: Money = Field(
        default=Decimal("500"),
        ge=0,
        allow_inf_nan=False,
        description="Spending ceiling compared against total spent"
    )
    base_currency: str = Field(
        default="USD",
        min_length=1,
        max_length=3,
        description="Currency the amounts are entered in"
    )
    currency2: CurrencyEntry = Field(
        default_factory=lambda: CurrencyEntry(code="EUR", rate=0.92)
    )
    currency3: CurrencyEntry = Field(
        default_factory=lambda: CurrencyEntry(code="KES", rate=130)
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class FieldValidation(BaseModel):
    """Outcome of checking a single form field."""

    is_valid: bool
    message: str = ""


class FormValidation(BaseModel):
    """
    Outcome of checking a whole form.

    `errors` holds one message per failing field and nothing for
    fields that passed.
    """

    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return len(self.errors)


# =============================================================================
# DASHBOARD MODELS
# =============================================================================

class BudgetStatus(BaseModel):
    """
    Budget cap comparison.

    When `is_over_budget` is True, `overage` is spent - cap and
    `remaining` is zero. Otherwise `remaining` is cap - spent.
    """

    is_over_budget: bool
    total_spent: Decimal
    budget_cap: Decimal
    overage: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")


class ConvertedTotal(BaseModel):
    """Total spent in one secondary currency slot."""

    slot: str
    code: str
    total: Decimal


class DashboardSummary(BaseModel):
    """Everything the presentation layer needs for the dashboard panel."""

    total_spent: Decimal
    top_category: Optional[Category] = None
    total_count: int = Field(ge=0)
    budget_cap: Decimal
    settings: UserSettings
    last_7_days_records: list[TransactionRecord] = Field(default_factory=list)
    budget_status: BudgetStatus
    converted_totals: list[ConvertedTotal] = Field(
        default_factory=list,
        description="Total spent expressed in each secondary currency"
    )
