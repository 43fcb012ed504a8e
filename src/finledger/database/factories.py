"""Ledger store factory functions.

The process entry point picks a backend once with ``create_ledger_store`` and
passes the returned ``LedgerStore`` to everything that needs it.
"""

import os
from pathlib import Path
from typing import Optional

from finledger.database.base import LedgerStore
from finledger.database.memory import InMemoryLedgerStore
from finledger.database.sqlalchemy_db import SQLAlchemyLedgerStore

BACKENDS = ("sqlite", "memory")


def create_memory_store() -> InMemoryLedgerStore:
    """Create an empty in-memory ledger store."""
    return InMemoryLedgerStore()


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyLedgerStore:
    """Create a SQLite-backed ledger store.

    Args:
        database_path: Path to SQLite database file. If None, checks FINLEDGER_DB_PATH
            environment variable, then defaults to ~/.finledger/finledger.db

    Returns:
        SQLAlchemyLedgerStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("FINLEDGER_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".finledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "finledger.db")

    return SQLAlchemyLedgerStore(f"sqlite:///{database_path}")


def create_ledger_store(
    backend: Optional[str] = None,
    database_path: Optional[str] = None,
    database_url: Optional[str] = None,
) -> LedgerStore:
    """Create the ledger store selected for this process.

    Args:
        backend: "sqlite" or "memory". If None, checks FINLEDGER_BACKEND,
            then defaults to "sqlite"
        database_path: SQLite file path for the sqlite backend
        database_url: Any SQLAlchemy URL; overrides database_path. If None,
            checks FINLEDGER_DATABASE_URL

    Returns:
        A connected store with its schema initialized

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = (backend or os.environ.get("FINLEDGER_BACKEND") or "sqlite").lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Supported backends: {', '.join(BACKENDS)}")

    if backend == "memory":
        store: LedgerStore = create_memory_store()
    else:
        database_url = database_url or os.environ.get("FINLEDGER_DATABASE_URL")
        if database_url:
            store = SQLAlchemyLedgerStore(database_url)
        else:
            store = create_sqlite_store(database_path)

    store.connect()
    store.initialize_schema()
    return store
