"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from finledger.database.models import (
    User as ORMUser,
    Category as ORMCategory,
    Expense as ORMExpense,
    Budget as ORMBudget,
    Goal as ORMGoal,
    Tip as ORMTip,
)
from finledger.database.mappers import (
    breakdown_from_json,
    breakdown_to_json,
    budget_to_domain,
    category_to_domain,
    expense_to_domain,
    goal_to_domain,
    tip_to_domain,
    user_to_domain,
)
from finledger.domain.entities import Budget, Category, Expense, Goal, Tip, TipType, User


class TestUserMapper:
    """Tests for User mapper."""

    def test_user_to_domain(self):
        """Test converting ORM User to domain User."""
        orm_user = ORMUser(id=1, username="alice", password="$2b$12$hash")
        user = user_to_domain(orm_user)

        assert isinstance(user, User)
        assert user.id == 1
        assert user.username == "alice"
        assert user.password == "$2b$12$hash"


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_to_domain(self):
        """Test converting ORM Category to domain Category."""
        category = category_to_domain(ORMCategory(id=3, user_id=1, name="Food"))

        assert isinstance(category, Category)
        assert category.id == 3
        assert category.user_id == 1
        assert category.name == "Food"


class TestExpenseMapper:
    """Tests for Expense mapper."""

    def test_expense_to_domain(self):
        """Test converting ORM Expense to domain Expense."""
        created = datetime(2024, 3, 10, 9, 0, tzinfo=UTC)
        orm_expense = ORMExpense(
            id=5,
            user_id=1,
            description="Groceries",
            amount=Decimal("45.5"),
            category="Food",
            date=date(2024, 3, 10),
            created_at=created,
        )
        expense = expense_to_domain(orm_expense)

        assert isinstance(expense, Expense)
        assert expense.amount == Decimal("45.50")
        assert expense.date == date(2024, 3, 10)
        assert expense.created_at == created

    def test_naive_created_at_becomes_utc(self):
        """Test that naive datetimes read back from SQLite are marked UTC."""
        orm_expense = ORMExpense(
            id=5,
            user_id=1,
            description="Groceries",
            amount=Decimal("1"),
            category="Food",
            date=date(2024, 3, 10),
            created_at=datetime(2024, 3, 10, 9, 0),
        )
        expense = expense_to_domain(orm_expense)

        assert expense.created_at.tzinfo is UTC
        assert expense.created_at == datetime(2024, 3, 10, 9, 0, tzinfo=UTC)


class TestBudgetMapper:
    """Tests for Budget mapper."""

    def test_budget_to_domain(self):
        """Test converting ORM Budget to domain Budget."""
        budget = budget_to_domain(
            ORMBudget(id=2, user_id=1, category="Food", amount=100, month=3, year=2024)
        )

        assert isinstance(budget, Budget)
        assert budget.amount == Decimal("100.00")
        assert (budget.month, budget.year) == (3, 2024)


class TestGoalMapper:
    """Tests for Goal mapper."""

    def test_goal_to_domain(self):
        """Test converting ORM Goal to domain Goal."""
        orm_goal = ORMGoal(
            id=4,
            user_id=1,
            name="Vacation",
            target_amount=Decimal("1200"),
            current_amount=Decimal("200"),
            deadline=date(2024, 12, 1),
            breakdown={"Flights": "600.00", "Hotel": "400"},
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        )
        goal = goal_to_domain(orm_goal)

        assert isinstance(goal, Goal)
        assert goal.target_amount == Decimal("1200.00")
        assert goal.current_amount == Decimal("200.00")
        assert goal.breakdown == {"Flights": Decimal("600.00"), "Hotel": Decimal("400.00")}

    def test_missing_breakdown(self):
        """Test that a NULL breakdown maps to an empty dict."""
        assert breakdown_from_json(None) == {}

    def test_breakdown_to_json_keeps_exact_amounts(self):
        """Test that amounts are serialized as strings."""
        assert breakdown_to_json({"Flights": Decimal("600.10")}) == {"Flights": "600.10"}


class TestTipMapper:
    """Tests for Tip mapper."""

    def test_tip_to_domain(self):
        """Test converting ORM Tip to domain Tip."""
        tip = tip_to_domain(
            ORMTip(id=1, type="weekly", message="Review subscriptions", created_at=datetime(2024, 1, 1))
        )

        assert isinstance(tip, Tip)
        assert tip.type is TipType.WEEKLY
        assert tip.created_at.tzinfo is UTC
