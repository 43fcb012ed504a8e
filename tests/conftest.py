"""Shared pytest fixtures for finledger tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
import pytest

from finledger.database.factories import create_memory_store, create_sqlite_store
from finledger.domain.entities import ExchangeRateSnapshot
from finledger.domain.errors import UpstreamUnavailable
from finledger.rates.cache import ExchangeRateCache
from finledger.rates.source import RateSource


@pytest.fixture
def temp_db():
    """Create a temporary SQLite-backed store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an empty in-memory store."""
    return create_memory_store()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Each ledger store backend in turn; contract tests run against both."""
    if request.param == "memory":
        return request.getfixturevalue("memory_db")
    return request.getfixturevalue("temp_db")


@pytest.fixture
def alice(store):
    """Create a sample user."""
    return store.create_user(username="alice", password="hash-a")


@pytest.fixture
def bob(store):
    """Create a second user for isolation tests."""
    return store.create_user(username="bob", password="hash-b")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeRateSource(RateSource):
    """Rate source returning canned rates and counting fetches."""

    def __init__(self, rates=None, error: Exception | None = None):
        self.rates = rates if rates is not None else {"USD": 1.0, "EUR": 0.9, "GBP": 0.8}
        self.error = error
        self.calls = 0

    def fetch(self) -> ExchangeRateSnapshot:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ExchangeRateSnapshot(rates=dict(self.rates), fetched_at=datetime.now(UTC))


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def rate_source():
    """Create a fake rate source."""
    return FakeRateSource()


@pytest.fixture
def rate_cache(rate_source, clock):
    """Create a rate cache over the fake source and clock."""
    return ExchangeRateCache(rate_source, clock=clock)


@pytest.fixture
def failing_rate_source():
    """Create a rate source that is always down."""
    return FakeRateSource(error=UpstreamUnavailable("Rate source request failed: boom"))
