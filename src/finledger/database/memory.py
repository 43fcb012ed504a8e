"""In-memory ledger store.

Each entity kind lives in an insertion-ordered dict keyed by ID, with its own
counter. Nothing survives the process; this backend exists for tests and
throwaway runs.
"""

import copy
import threading
from datetime import datetime, UTC
from itertools import count
from typing import Optional, Any, Callable, Mapping, TypeVar

from finledger.database.base import LedgerStore
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
from finledger.domain.errors import (
    ConflictError,
    duplicate_budget,
    duplicate_username,
)
from finledger.domain.validation import (
    validate_changes,
    validate_payload,
    validate_tip_type,
    validate_user,
)
from finledger.logging_config import get_logger

logger = get_logger(__name__)

E = TypeVar("E")

_KINDS = ("user", "category", "invoice", "expense", "budget", "goal", "tip")


class InMemoryLedgerStore(LedgerStore):
    """Volatile implementation of the LedgerStore interface.

    One lock guards every mutation (counter increment plus insert, goal
    merges, deletes). Entities are built completely before they are inserted,
    and readers copy rows out under the same lock, so a half-written entity
    is never visible. Returned entities are deep copies.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._rows: dict[str, dict[int, Any]] = {kind: {} for kind in _KINDS}
        self._counters = {kind: count(1) for kind in _KINDS}

    def connect(self) -> None:
        """Connect to the store (nothing to do)."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the store (nothing to do)."""
        pass

    def initialize_schema(self) -> None:
        """Initialize schema (nothing to do)."""
        pass

    # Internal helpers
    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _snapshot(self, kind: str, predicate: Callable[[Any], bool]) -> list:
        with self._lock:
            rows = [row for row in self._rows[kind].values() if predicate(row)]
            return copy.deepcopy(rows)

    def _insert(self, kind: str, build: Callable[[int], E]) -> E:
        """Reserve the next ID, build the entity and store it atomically."""
        with self._lock:
            entity_id = next(self._counters[kind])
            entity = build(entity_id)
            self._rows[kind][entity_id] = entity
        logger.debug("entity_created", kind=kind, id=entity_id)
        return copy.deepcopy(entity)

    def _get_owned(self, kind: str, user_id: int, entity_id: int) -> Optional[Any]:
        with self._lock:
            entity = self._rows[kind].get(entity_id)
            if entity is None or entity.user_id != user_id:
                return None
            return copy.deepcopy(entity)

    def _delete_owned(self, kind: str, user_id: int, entity_id: int) -> bool:
        with self._lock:
            entity = self._rows[kind].get(entity_id)
            if entity is None or entity.user_id != user_id:
                return False
            del self._rows[kind][entity_id]
        logger.debug("entity_deleted", kind=kind, id=entity_id)
        return True

    def _list_owned(self, kind: str, user_id: int) -> list:
        return self._snapshot(kind, lambda row: row.user_id == user_id)

    # User operations
    def create_user(self, username: str, password: str) -> User:
        """Create a user."""
        username, password = validate_user(username, password)
        with self._lock:
            if any(user.username == username for user in self._rows["user"].values()):
                raise ConflictError(duplicate_username(username))
            return self._insert(
                "user", lambda user_id: User(id=user_id, username=username, password=password)
            )

    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        with self._lock:
            return copy.deepcopy(self._rows["user"].get(user_id))

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        users = self._snapshot("user", lambda user: user.username == username)
        return users[0] if users else None

    # Category operations
    def list_categories(self, user_id: int) -> list[Category]:
        """List categories owned by a user."""
        return self._list_owned("category", user_id)

    def create_category(self, user_id: int, payload: Mapping[str, Any]) -> Category:
        """Create a category for a user."""
        values = validate_payload("category", payload)
        return self._insert(
            "category", lambda category_id: Category(id=category_id, user_id=user_id, **values)
        )

    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        """Get one of the user's categories by ID."""
        return self._get_owned("category", user_id, category_id)

    def delete_category(self, user_id: int, category_id: int) -> bool:
        """Delete one of the user's categories."""
        return self._delete_owned("category", user_id, category_id)

    # Invoice operations
    def list_invoices(self, user_id: int) -> list[Invoice]:
        """List invoices owned by a user."""
        return self._list_owned("invoice", user_id)

    def create_invoice(self, user_id: int, payload: Mapping[str, Any]) -> Invoice:
        """Create an invoice for a user."""
        values = validate_payload("invoice", payload)
        return self._insert(
            "invoice",
            lambda invoice_id: Invoice(
                id=invoice_id, user_id=user_id, created_at=self._now(), **values
            ),
        )

    def get_invoice(self, user_id: int, invoice_id: int) -> Optional[Invoice]:
        """Get one of the user's invoices by ID."""
        return self._get_owned("invoice", user_id, invoice_id)

    def delete_invoice(self, user_id: int, invoice_id: int) -> bool:
        """Delete one of the user's invoices."""
        return self._delete_owned("invoice", user_id, invoice_id)

    # Expense operations
    def list_expenses(self, user_id: int) -> list[Expense]:
        """List expenses owned by a user."""
        return self._list_owned("expense", user_id)

    def create_expense(self, user_id: int, payload: Mapping[str, Any]) -> Expense:
        """Create an expense for a user."""
        values = validate_payload("expense", payload)
        return self._insert(
            "expense",
            lambda expense_id: Expense(
                id=expense_id, user_id=user_id, created_at=self._now(), **values
            ),
        )

    def get_expense(self, user_id: int, expense_id: int) -> Optional[Expense]:
        """Get one of the user's expenses by ID."""
        return self._get_owned("expense", user_id, expense_id)

    def delete_expense(self, user_id: int, expense_id: int) -> bool:
        """Delete one of the user's expenses."""
        return self._delete_owned("expense", user_id, expense_id)

    # Budget operations
    def list_budgets(self, user_id: int) -> list[Budget]:
        """List all budgets owned by a user."""
        return self._list_owned("budget", user_id)

    def list_budgets_for_period(self, user_id: int, month: int, year: int) -> list[Budget]:
        """List the user's budgets for exactly this month and year."""
        return self._snapshot(
            "budget",
            lambda budget: budget.user_id == user_id
            and budget.month == month
            and budget.year == year,
        )

    def create_budget(self, user_id: int, payload: Mapping[str, Any]) -> Budget:
        """Create a budget for a user."""
        values = validate_payload("budget", payload)
        with self._lock:
            for budget in self._rows["budget"].values():
                if (budget.user_id, budget.category, budget.month, budget.year) == (
                    user_id,
                    values["category"],
                    values["month"],
                    values["year"],
                ):
                    raise ConflictError(
                        duplicate_budget(values["category"], values["month"], values["year"])
                    )
            return self._insert(
                "budget", lambda budget_id: Budget(id=budget_id, user_id=user_id, **values)
            )

    def get_budget(self, user_id: int, budget_id: int) -> Optional[Budget]:
        """Get one of the user's budgets by ID."""
        return self._get_owned("budget", user_id, budget_id)

    def delete_budget(self, user_id: int, budget_id: int) -> bool:
        """Delete one of the user's budgets."""
        return self._delete_owned("budget", user_id, budget_id)

    # Goal operations
    def list_goals(self, user_id: int) -> list[Goal]:
        """List goals owned by a user."""
        return self._list_owned("goal", user_id)

    def create_goal(self, user_id: int, payload: Mapping[str, Any]) -> Goal:
        """Create a goal for a user."""
        values = validate_payload("goal", payload)
        return self._insert(
            "goal",
            lambda goal_id: Goal(id=goal_id, user_id=user_id, created_at=self._now(), **values),
        )

    def get_goal(self, user_id: int, goal_id: int) -> Optional[Goal]:
        """Get one of the user's goals by ID."""
        return self._get_owned("goal", user_id, goal_id)

    def update_goal(self, user_id: int, goal_id: int, changes: Mapping[str, Any]) -> Optional[Goal]:
        """Merge the given fields into one of the user's goals."""
        values = validate_changes("goal", changes)
        with self._lock:
            goal = self._rows["goal"].get(goal_id)
            if goal is None or goal.user_id != user_id:
                return None
            current = {
                "name": goal.name,
                "target_amount": goal.target_amount,
                "current_amount": goal.current_amount,
                "deadline": goal.deadline,
                "breakdown": goal.breakdown,
            }
            current.update(values)
            updated = Goal(
                id=goal.id, user_id=goal.user_id, created_at=goal.created_at, **current
            )
            self._rows["goal"][goal_id] = updated
        logger.debug("goal_updated", id=goal_id, fields=sorted(values))
        return copy.deepcopy(updated)

    def delete_goal(self, user_id: int, goal_id: int) -> bool:
        """Delete one of the user's goals."""
        return self._delete_owned("goal", user_id, goal_id)

    # Tip operations
    def create_tip(self, payload: Mapping[str, Any]) -> Tip:
        """Create a tip."""
        values = validate_payload("tip", payload)
        return self._insert(
            "tip", lambda tip_id: Tip(id=tip_id, created_at=self._now(), **values)
        )

    def list_tips(self, tip_type: Optional[TipType] = None) -> list[Tip]:
        """List tips, optionally filtered by type."""
        if tip_type is None:
            return self._snapshot("tip", lambda tip: True)
        tip_type = validate_tip_type(tip_type)
        return self._snapshot("tip", lambda tip: tip.type == tip_type)
