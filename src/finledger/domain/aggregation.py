"""Pure aggregation functions over ledger entities.

Nothing here touches a store; callers pass in lists they already fetched, and
inputs are never modified.
"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from finledger.domain.entities import (
    Budget,
    BudgetComparison,
    BudgetTotals,
    Expense,
    Goal,
    GoalPace,
)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

DEFAULT_EXPENSE_CATEGORIES = (
    "Housing",
    "Transportation",
    "Food",
    "Utilities",
    "Insurance",
    "Healthcare",
    "Entertainment",
    "Other",
)


def _in_period(day: date, month: int, year: int) -> bool:
    return day.month == month and day.year == year


def budget_vs_expenses(
    expenses: Iterable[Expense],
    budgets: Iterable[Budget],
    month: int,
    year: int,
    user_id: Optional[int] = None,
    categories: Sequence[str] = (),
) -> list[BudgetComparison]:
    """Compare spending with budgets per category for one month.

    Rows are produced for the given ``categories`` first, then for any other
    category that has a budget or an expense in the period, in the order they
    are first seen. Expenses and budgets outside the period, or owned by a
    different user when ``user_id`` is given, are ignored.

    Args:
        expenses: Expenses to total
        budgets: Budgets to compare against
        month: Month (1-12)
        year: Year
        user_id: Optional owner filter
        categories: Categories that always get a row, even when empty

    Returns:
        One BudgetComparison per category; ``budget`` is 0 when none is set
    """
    def owned(entity) -> bool:
        return user_id is None or entity.user_id == user_id

    period_expenses = [e for e in expenses if owned(e) and _in_period(e.date, month, year)]
    period_budgets = [b for b in budgets if owned(b) and b.month == month and b.year == year]

    order: dict[str, None] = dict.fromkeys(categories)
    order.update(dict.fromkeys(b.category for b in period_budgets))
    order.update(dict.fromkeys(e.category for e in period_expenses))

    totals: dict[str, Decimal] = {category: ZERO for category in order}
    for expense in period_expenses:
        totals[expense.category] += expense.amount

    limits: dict[str, Decimal] = {}
    for budget in period_budgets:
        # First budget wins if legacy data holds duplicates
        limits.setdefault(budget.category, budget.amount)

    return [
        BudgetComparison(
            category=category,
            total_expenses=totals[category],
            budget=limits.get(category, ZERO),
        )
        for category in order
    ]


def budget_totals(rows: Iterable[BudgetComparison]) -> BudgetTotals:
    """Sum spending and budgets across report rows."""
    total_expenses = ZERO
    total_budget = ZERO
    for row in rows:
        total_expenses += row.total_expenses
        total_budget += row.budget
    return BudgetTotals(total_expenses=total_expenses, total_budget=total_budget)


def whole_months_between(start: date, end: date) -> int:
    """Number of full calendar months from ``start`` to ``end``.

    Partial months are dropped; the result is negative when ``end`` is before
    ``start``.
    """
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def goal_pace(goal: Goal, today: date) -> GoalPace:
    """Monthly saving needed to reach a goal by its deadline.

    At least one month is always assumed, so past or imminent deadlines ask
    for the full remainder now. A goal already met or exceeded needs 0.
    """
    months_remaining = max(1, whole_months_between(today, goal.deadline))
    remaining = goal.target_amount - goal.current_amount
    if remaining > 0:
        monthly = (remaining / months_remaining).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        monthly = ZERO

    if goal.target_amount > 0:
        progress = (goal.current_amount / goal.target_amount * 100).quantize(
            CENTS, rounding=ROUND_HALF_UP
        )
    else:
        progress = ZERO

    return GoalPace(
        months_remaining=months_remaining,
        remaining=remaining,
        monthly_savings_needed=monthly,
        progress_percent=progress,
    )
