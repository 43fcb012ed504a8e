"""Tests for the report service."""

from datetime import date
from decimal import Decimal

from finledger.domain.aggregation import DEFAULT_EXPENSE_CATEGORIES
from finledger.domain.reports import ReportService


def test_budget_report_uses_stored_data(store, alice, bob):
    """Test building a monthly report from the store."""
    store.create_expense(alice.id, {"description": "Shop", "amount": 30, "category": "Food", "date": date(2024, 3, 2)})
    store.create_expense(alice.id, {"description": "Cafe", "amount": 20, "category": "Food", "date": date(2024, 3, 9)})
    store.create_expense(alice.id, {"description": "Old", "amount": 99, "category": "Food", "date": date(2024, 2, 9)})
    store.create_expense(bob.id, {"description": "Bob", "amount": 500, "category": "Food", "date": date(2024, 3, 9)})
    store.create_budget(alice.id, {"category": "Food", "amount": 100, "month": 3, "year": 2024})

    rows, totals = ReportService(store).budget_report(alice.id, 3, 2024)

    assert [r.category for r in rows] == list(DEFAULT_EXPENSE_CATEGORIES)
    food = next(r for r in rows if r.category == "Food")
    assert food.total_expenses == Decimal("50.00")
    assert food.budget == Decimal("100.00")
    assert totals.total_expenses == Decimal("50.00")
    assert totals.total_budget == Decimal("100.00")


def test_budget_report_custom_categories(store, alice):
    """Test that spending outside the fixed categories still appears."""
    store.create_expense(alice.id, {"description": "Vet", "amount": 40, "category": "Pets", "date": date(2024, 3, 2)})

    rows, _ = ReportService(store).budget_report(alice.id, 3, 2024, categories=())

    assert [(r.category, r.total_expenses, r.budget) for r in rows] == [
        ("Pets", Decimal("40.00"), Decimal("0"))
    ]


def test_goal_pace(store, alice):
    """Test pace for a stored goal."""
    goal = store.create_goal(
        alice.id,
        {"name": "Vacation", "target_amount": 1200, "current_amount": 200, "deadline": date(2024, 6, 15)},
    )

    pace = ReportService(store).goal_pace(alice.id, goal.id, today=date(2024, 1, 15))

    assert pace.monthly_savings_needed == Decimal("200.00")


def test_goal_pace_for_other_user(store, alice, bob):
    """Test that another user's goal is not found."""
    goal = store.create_goal(
        alice.id, {"name": "Vacation", "target_amount": 1200, "deadline": date(2024, 6, 15)}
    )
    assert ReportService(store).goal_pace(bob.id, goal.id) is None
