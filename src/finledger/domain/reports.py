"""Report domain service."""

from datetime import date
from typing import Optional, Sequence

from finledger.database.base import LedgerStore
from finledger.domain.aggregation import (
    DEFAULT_EXPENSE_CATEGORIES,
    budget_totals,
    budget_vs_expenses,
    goal_pace,
)
from finledger.domain.entities import BudgetComparison, BudgetTotals, GoalPace


class ReportService:
    """Service for derived budget and goal views."""

    def __init__(self, store: LedgerStore):
        """Initialize report service.

        Args:
            store: Ledger store instance
        """
        self.store = store

    def budget_report(
        self,
        user_id: int,
        month: int,
        year: int,
        categories: Sequence[str] = DEFAULT_EXPENSE_CATEGORIES,
    ) -> tuple[list[BudgetComparison], BudgetTotals]:
        """Build the budget-vs-expense report for one month.

        Args:
            user_id: Owner of the expenses and budgets
            month: Month (1-12)
            year: Year
            categories: Categories that always appear in the report

        Returns:
            Tuple of (per-category rows, totals)
        """
        rows = budget_vs_expenses(
            expenses=self.store.list_expenses(user_id),
            budgets=self.store.list_budgets_for_period(user_id, month, year),
            month=month,
            year=year,
            user_id=user_id,
            categories=categories,
        )
        return rows, budget_totals(rows)

    def goal_pace(self, user_id: int, goal_id: int, today: Optional[date] = None) -> Optional[GoalPace]:
        """Compute savings pace for one of the user's goals.

        Returns:
            GoalPace, or None if the goal does not exist or is not the user's
        """
        goal = self.store.get_goal(user_id, goal_id)
        if goal is None:
            return None
        return goal_pace(goal, today or date.today())
