"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Mapping

# Import entities directly to avoid circular import through domain/__init__.py
from finledger.domain.entities import (
    User,
    Category,
    Invoice,
    Expense,
    Budget,
    Goal,
    Tip,
    TipType,
)


class LedgerStore(ABC):
    """Storage contract for finledger entities.

    Every user-scoped read takes the owning ``user_id`` and never returns rows
    owned by anyone else. Entities that do not exist and entities owned by a
    different user are indistinguishable: both come back as ``None`` (or
    ``False`` for deletes).

    Create payloads exclude ``id``, ``user_id`` and ``created_at``; the store
    assigns those. Invalid payloads raise ``ValidationError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the backing storage."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str, password: str) -> User:
        """Create a user. Raises ConflictError if the username is taken."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    # Category operations
    @abstractmethod
    def list_categories(self, user_id: int) -> list[Category]:
        """List categories owned by a user."""
        pass

    @abstractmethod
    def create_category(self, user_id: int, payload: Mapping[str, Any]) -> Category:
        """Create a category for a user."""
        pass

    @abstractmethod
    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        """Get one of the user's categories by ID."""
        pass

    @abstractmethod
    def delete_category(self, user_id: int, category_id: int) -> bool:
        """Delete one of the user's categories. Returns False if absent."""
        pass

    # Invoice operations
    @abstractmethod
    def list_invoices(self, user_id: int) -> list[Invoice]:
        """List invoices owned by a user."""
        pass

    @abstractmethod
    def create_invoice(self, user_id: int, payload: Mapping[str, Any]) -> Invoice:
        """Create an invoice for a user."""
        pass

    @abstractmethod
    def get_invoice(self, user_id: int, invoice_id: int) -> Optional[Invoice]:
        """Get one of the user's invoices by ID."""
        pass

    @abstractmethod
    def delete_invoice(self, user_id: int, invoice_id: int) -> bool:
        """Delete one of the user's invoices. Returns False if absent."""
        pass

    # Expense operations
    @abstractmethod
    def list_expenses(self, user_id: int) -> list[Expense]:
        """List expenses owned by a user."""
        pass

    @abstractmethod
    def create_expense(self, user_id: int, payload: Mapping[str, Any]) -> Expense:
        """Create an expense for a user."""
        pass

    @abstractmethod
    def get_expense(self, user_id: int, expense_id: int) -> Optional[Expense]:
        """Get one of the user's expenses by ID."""
        pass

    @abstractmethod
    def delete_expense(self, user_id: int, expense_id: int) -> bool:
        """Delete one of the user's expenses. Returns False if absent."""
        pass

    # Budget operations
    @abstractmethod
    def list_budgets(self, user_id: int) -> list[Budget]:
        """List all budgets owned by a user."""
        pass

    @abstractmethod
    def list_budgets_for_period(self, user_id: int, month: int, year: int) -> list[Budget]:
        """List the user's budgets for exactly this month and year."""
        pass

    @abstractmethod
    def create_budget(self, user_id: int, payload: Mapping[str, Any]) -> Budget:
        """Create a budget for a user.

        Raises ConflictError if the user already has a budget for the same
        category, month and year.
        """
        pass

    @abstractmethod
    def get_budget(self, user_id: int, budget_id: int) -> Optional[Budget]:
        """Get one of the user's budgets by ID."""
        pass

    @abstractmethod
    def delete_budget(self, user_id: int, budget_id: int) -> bool:
        """Delete one of the user's budgets. Returns False if absent."""
        pass

    # Goal operations
    @abstractmethod
    def list_goals(self, user_id: int) -> list[Goal]:
        """List goals owned by a user."""
        pass

    @abstractmethod
    def create_goal(self, user_id: int, payload: Mapping[str, Any]) -> Goal:
        """Create a goal for a user."""
        pass

    @abstractmethod
    def get_goal(self, user_id: int, goal_id: int) -> Optional[Goal]:
        """Get one of the user's goals by ID."""
        pass

    @abstractmethod
    def update_goal(self, user_id: int, goal_id: int, changes: Mapping[str, Any]) -> Optional[Goal]:
        """Merge the given fields into one of the user's goals.

        Fields not present in ``changes`` are left untouched. Returns the
        updated goal, or None (with nothing modified) if the goal does not
        exist or belongs to another user.
        """
        pass

    @abstractmethod
    def delete_goal(self, user_id: int, goal_id: int) -> bool:
        """Delete one of the user's goals. Returns False if absent."""
        pass

    # Tip operations
    @abstractmethod
    def create_tip(self, payload: Mapping[str, Any]) -> Tip:
        """Create a tip."""
        pass

    @abstractmethod
    def list_tips(self, tip_type: Optional[TipType] = None) -> list[Tip]:
        """List tips, optionally filtered by type."""
        pass

    def get_latest_tip(self, tip_type: TipType) -> Optional[Tip]:
        """Get the most recently created tip of a type."""
        tips = self.list_tips(tip_type=tip_type)
        if not tips:
            return None
        return max(tips, key=lambda tip: tip.id)
