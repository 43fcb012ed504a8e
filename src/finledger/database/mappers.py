"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay the
same whichever backend produced them.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Mapping, Optional

from finledger.domain import entities as domain
from finledger.database.models import (
    User as ORMUser,
    Category as ORMCategory,
    Invoice as ORMInvoice,
    Expense as ORMExpense,
    Budget as ORMBudget,
    Goal as ORMGoal,
    Tip as ORMTip,
)

CENTS = Decimal("0.01")


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENTS)


def breakdown_to_json(breakdown: Mapping[str, Decimal]) -> dict[str, str]:
    """Serialize a goal breakdown for the JSON column."""
    return {label: str(amount) for label, amount in breakdown.items()}


def breakdown_from_json(data: Optional[Mapping[str, str]]) -> dict[str, Decimal]:
    """Deserialize a goal breakdown from the JSON column."""
    return {label: _money(amount) for label, amount in (data or {}).items()}


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        password=orm_user.password,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        user_id=orm_invoice.user_id,
        customer_name=orm_invoice.customer_name,
        description=orm_invoice.description,
        amount=_money(orm_invoice.amount),
        due_date=orm_invoice.due_date,
        status=orm_invoice.status,
        created_at=_utc(orm_invoice.created_at),
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        user_id=orm_expense.user_id,
        description=orm_expense.description,
        amount=_money(orm_expense.amount),
        category=orm_expense.category,
        date=orm_expense.date,
        created_at=_utc(orm_expense.created_at),
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        user_id=orm_budget.user_id,
        category=orm_budget.category,
        amount=_money(orm_budget.amount),
        month=orm_budget.month,
        year=orm_budget.year,
    )


def goal_to_domain(orm_goal: ORMGoal) -> domain.Goal:
    """Convert SQLAlchemy Goal model to domain Goal entity."""
    return domain.Goal(
        id=orm_goal.id,
        user_id=orm_goal.user_id,
        name=orm_goal.name,
        target_amount=_money(orm_goal.target_amount),
        current_amount=_money(orm_goal.current_amount),
        deadline=orm_goal.deadline,
        breakdown=breakdown_from_json(orm_goal.breakdown),
        created_at=_utc(orm_goal.created_at),
    )


def tip_to_domain(orm_tip: ORMTip) -> domain.Tip:
    """Convert SQLAlchemy Tip model to domain Tip entity."""
    return domain.Tip(
        id=orm_tip.id,
        type=domain.TipType(orm_tip.type),
        message=orm_tip.message,
        created_at=_utc(orm_tip.created_at),
    )
