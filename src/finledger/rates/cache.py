"""Time-bounded cache of exchange rates used for currency conversion."""

import dataclasses
import threading
from concurrent.futures import Future
from datetime import datetime, timedelta, UTC
from decimal import Decimal
from typing import Callable, Optional

from finledger.domain.entities import ExchangeRateSnapshot
from finledger.domain.errors import UnknownCurrency
from finledger.logging_config import get_logger
from finledger.rates.source import RateSource
from finledger.utils.amount_parser import to_decimal

logger = get_logger(__name__)

DEFAULT_MAX_AGE = timedelta(hours=24)


class ExchangeRateCache:
    """Holds one snapshot of rates and refreshes it when it goes stale.

    Refreshes are single-flight: while one caller is fetching, every other
    caller that finds the cache cold waits for that same fetch and receives
    its snapshot or its exception. A failed refresh leaves the cache empty;
    stale rates are never served and nothing is retried here.
    """

    def __init__(
        self,
        source: RateSource,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.source = source
        self.max_age = max_age
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[ExchangeRateSnapshot] = None
        self._inflight: Optional[Future] = None

    def _is_fresh(self, snapshot: Optional[ExchangeRateSnapshot]) -> bool:
        return snapshot is not None and self._clock() - snapshot.fetched_at < self.max_age

    def get_snapshot(self) -> ExchangeRateSnapshot:
        """Return a snapshot no older than ``max_age``, fetching if needed.

        Raises:
            UpstreamUnavailable: If a refresh was needed and failed
        """
        with self._lock:
            if self._is_fresh(self._snapshot):
                return self._snapshot
            if self._inflight is not None:
                future = self._inflight
                leader = False
            else:
                future = Future()
                self._inflight = future
                self._snapshot = None
                leader = True

        if not leader:
            return future.result()

        try:
            snapshot = self.source.fetch()
            snapshot = dataclasses.replace(snapshot, fetched_at=self._clock())
        except BaseException as e:
            with self._lock:
                self._inflight = None
            logger.warning("exchange_rates_refresh_failed", error=str(e))
            future.set_exception(e)
            raise

        with self._lock:
            self._snapshot = snapshot
            self._inflight = None
        logger.info("exchange_rates_refreshed", currencies=len(snapshot.rates))
        future.set_result(snapshot)
        return snapshot

    def invalidate(self) -> None:
        """Drop the cached snapshot so the next call refreshes."""
        with self._lock:
            self._snapshot = None

    def convert(self, amount: Decimal | int | float | str, from_code: str, to_code: str) -> Decimal:
        """Convert an amount between two currencies.

        Args:
            amount: Amount in ``from_code``
            from_code: ISO 4217 code of the source currency
            to_code: ISO 4217 code of the target currency

        Returns:
            ``(amount / rates[from_code]) * rates[to_code]`` as a Decimal

        Raises:
            UpstreamUnavailable: If the rates needed refreshing and could not be fetched
            UnknownCurrency: If either code is missing from the snapshot
        """
        value = to_decimal(amount)
        snapshot = self.get_snapshot()
        from_rate = _rate(snapshot, from_code)
        to_rate = _rate(snapshot, to_code)
        return (value / from_rate) * to_rate


def _rate(snapshot: ExchangeRateSnapshot, code: str) -> Decimal:
    rate = snapshot.rates.get(code.upper())
    if not rate:
        raise UnknownCurrency(code)
    # str() keeps 0.9 as Decimal("0.9") instead of its binary expansion
    return Decimal(str(rate))
