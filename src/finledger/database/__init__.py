"""Storage layer for finledger."""

from finledger.database.base import LedgerStore
from finledger.database.factories import (
    create_ledger_store,
    create_memory_store,
    create_sqlite_store,
)

__all__ = ["LedgerStore", "create_ledger_store", "create_memory_store", "create_sqlite_store"]
