"""Domain model entities for finledger.

These are pure data classes representing business concepts, independent of
the storage backend. Both ledger store implementations return these types, so
callers never see ORM rows or backend-owned mutable state.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TipType(str, Enum):
    """Kinds of spending tips."""

    DAILY = "daily"
    WEEKLY = "weekly"
    CHALLENGE = "challenge"


@dataclass(frozen=True)
class User:
    """Account holder; every other entity except Tip belongs to one."""

    id: int
    username: str
    password: str


@dataclass(frozen=True)
class Category:
    """User-defined expense category."""

    id: int
    user_id: int
    name: str


@dataclass(frozen=True)
class Invoice:
    """Invoice issued by a user to a customer."""

    id: int
    user_id: int
    customer_name: str
    description: str
    amount: Decimal
    due_date: date
    status: str
    created_at: datetime


@dataclass(frozen=True)
class Expense:
    """Single recorded expense."""

    id: int
    user_id: int
    description: str
    amount: Decimal
    category: str
    date: date
    created_at: datetime


@dataclass(frozen=True)
class Budget:
    """Spending limit for one category in one calendar month."""

    id: int
    user_id: int
    category: str
    amount: Decimal
    month: int
    year: int


@dataclass(frozen=True)
class Goal:
    """Savings goal.

    ``current_amount`` may exceed ``target_amount``; overshoot is a valid state.
    ``breakdown`` maps a free-form label to the part of the target it covers.
    """

    id: int
    user_id: int
    name: str
    target_amount: Decimal
    deadline: date
    created_at: datetime
    current_amount: Decimal = Decimal("0.00")
    breakdown: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class Tip:
    """Spending tip, shared by all users."""

    id: int
    type: TipType
    message: str
    created_at: datetime


@dataclass(frozen=True)
class ExchangeRateSnapshot:
    """Rates relative to USD as published by the rate source."""

    rates: dict[str, float]
    fetched_at: datetime
    source_updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BudgetComparison:
    """Budget against actual spending for one category."""

    category: str
    total_expenses: Decimal
    budget: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.budget - self.total_expenses


@dataclass(frozen=True)
class BudgetTotals:
    """Totals across all rows of a budget report."""

    total_expenses: Decimal
    total_budget: Decimal


@dataclass(frozen=True)
class GoalPace:
    """How much must be saved each month to reach a goal by its deadline."""

    months_remaining: int
    remaining: Decimal
    monthly_savings_needed: Decimal
    progress_percent: Decimal


@dataclass(frozen=True)
class InvoiceConversion:
    """Invoice amount expressed in another currency."""

    invoice_id: int
    original_amount: Decimal
    converted_amount: Decimal
    currency: str
