"""Tests for the exchange rate cache."""

import threading
import time
import pytest
from datetime import timedelta
from decimal import Decimal

from finledger.domain.entities import ExchangeRateSnapshot
from finledger.domain.errors import UnknownCurrency, UpstreamUnavailable
from finledger.rates.cache import ExchangeRateCache

from conftest import FakeRateSource


class BlockingRateSource(FakeRateSource):
    """Rate source that holds each fetch until released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch(self) -> ExchangeRateSnapshot:
        self.started.set()
        self.release.wait(timeout=5)
        return super().fetch()


def _run_concurrently(cache, count):
    results = []
    errors = []

    def worker():
        try:
            results.append(cache.get_snapshot())
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(count)]
    return threads, results, errors


class TestConvert:
    """Tests for currency conversion."""

    def test_usd_to_eur(self, rate_cache):
        """Test converting 100 USD to EUR."""
        assert rate_cache.convert(Decimal("100"), "USD", "EUR") == Decimal("90")

    def test_cross_rate(self, rate_cache):
        """Test converting between two non-base currencies."""
        result = rate_cache.convert(Decimal("90"), "EUR", "GBP")
        assert result == Decimal("80")

    def test_codes_are_case_insensitive(self, rate_cache):
        """Test lower-case currency codes."""
        assert rate_cache.convert("100", "usd", "eur") == Decimal("90")

    def test_result_is_decimal(self, rate_cache):
        """Test that conversions produce Decimals."""
        assert isinstance(rate_cache.convert(1, "USD", "GBP"), Decimal)

    def test_unknown_target(self, rate_cache):
        """Test that a missing target code raises UnknownCurrency."""
        with pytest.raises(UnknownCurrency) as exc_info:
            rate_cache.convert(Decimal("100"), "USD", "XXX")
        assert exc_info.value.code == "XXX"

    def test_unknown_source(self, rate_cache):
        """Test that a missing source code raises UnknownCurrency."""
        with pytest.raises(UnknownCurrency):
            rate_cache.convert(Decimal("100"), "XXX", "USD")

    def test_zero_rate_is_unknown(self, clock):
        """Test that a zero rate is treated as missing."""
        cache = ExchangeRateCache(FakeRateSource(rates={"USD": 1.0, "ABC": 0.0}), clock=clock)
        with pytest.raises(UnknownCurrency):
            cache.convert(Decimal("10"), "ABC", "USD")

    def test_amounts_are_not_rounded_before_converting(self, clock):
        """Test that sub-cent amounts convert the same whatever their type."""
        cache = ExchangeRateCache(FakeRateSource(rates={"USD": 1, "JPY": 150}), clock=clock)

        exact = cache.convert(Decimal("0.004"), "USD", "JPY")

        assert exact == Decimal("0.6")
        assert cache.convert(0.004, "USD", "JPY") == exact
        assert cache.convert("0.004", "USD", "JPY") == exact


class TestFreshness:
    """Tests for the freshness window."""

    def test_fetches_once_within_window(self, rate_cache, rate_source, clock):
        """Test that repeated lookups within 24 hours reuse the snapshot."""
        rate_cache.convert(1, "USD", "EUR")
        clock.advance(hours=23, minutes=59)
        rate_cache.convert(1, "USD", "EUR")
        assert rate_source.calls == 1

    def test_refetches_after_window(self, rate_cache, rate_source, clock):
        """Test that a snapshot 24 hours old is refreshed."""
        rate_cache.get_snapshot()
        clock.advance(hours=24)
        rate_cache.get_snapshot()
        assert rate_source.calls == 2

    def test_snapshot_stamped_with_cache_clock(self, rate_cache, clock):
        """Test that fetched_at comes from the cache's clock."""
        assert rate_cache.get_snapshot().fetched_at == clock.now

    def test_custom_max_age(self, rate_source, clock):
        """Test a shorter freshness window."""
        cache = ExchangeRateCache(rate_source, max_age=timedelta(minutes=5), clock=clock)
        cache.get_snapshot()
        clock.advance(minutes=5)
        cache.get_snapshot()
        assert rate_source.calls == 2

    def test_invalidate(self, rate_cache, rate_source):
        """Test that invalidating forces a refresh."""
        rate_cache.get_snapshot()
        rate_cache.invalidate()
        rate_cache.get_snapshot()
        assert rate_source.calls == 2


class TestFailure:
    """Tests for refresh failures."""

    def test_failure_propagates(self, failing_rate_source, clock):
        """Test that an unreachable source raises UpstreamUnavailable."""
        cache = ExchangeRateCache(failing_rate_source, clock=clock)
        with pytest.raises(UpstreamUnavailable):
            cache.convert(1, "USD", "EUR")

    def test_no_stale_fallback(self, rate_cache, rate_source, clock):
        """Test that expired rates are not served when the refresh fails."""
        rate_cache.get_snapshot()
        clock.advance(hours=25)
        rate_source.error = UpstreamUnavailable("down")

        with pytest.raises(UpstreamUnavailable):
            rate_cache.convert(1, "USD", "EUR")

    def test_recovers_on_next_call(self, rate_cache, rate_source):
        """Test that a later call retries after a failure."""
        rate_source.error = UpstreamUnavailable("down")
        with pytest.raises(UpstreamUnavailable):
            rate_cache.get_snapshot()

        rate_source.error = None
        assert rate_cache.convert(100, "USD", "EUR") == Decimal("90")
        assert rate_source.calls == 2


class TestSingleFlight:
    """Tests for concurrent refreshes."""

    def test_concurrent_callers_share_one_fetch(self, clock):
        """Test that concurrent callers on a cold cache cause a single fetch."""
        source = BlockingRateSource()
        cache = ExchangeRateCache(source, clock=clock)
        threads, results, errors = _run_concurrently(cache, 8)

        threads[0].start()
        assert source.started.wait(timeout=5)
        for thread in threads[1:]:
            thread.start()
        time.sleep(0.05)
        source.release.set()
        for thread in threads:
            thread.join(timeout=5)

        assert errors == []
        assert len(results) == 8
        assert source.calls == 1
        assert all(result is results[0] for result in results)

    def test_concurrent_callers_share_failure(self, clock):
        """Test that waiting callers receive the leader's failure."""
        source = BlockingRateSource(error=UpstreamUnavailable("down"))
        cache = ExchangeRateCache(source, clock=clock)
        threads, results, errors = _run_concurrently(cache, 4)

        threads[0].start()
        assert source.started.wait(timeout=5)
        for thread in threads[1:]:
            thread.start()
        time.sleep(0.05)
        source.release.set()
        for thread in threads:
            thread.join(timeout=5)

        assert results == []
        assert len(errors) == 4
        assert all(isinstance(e, UpstreamUnavailable) for e in errors)

    def test_stale_cache_refreshed_once_under_concurrency(self, clock):
        """Test that callers racing on an expired snapshot cause a single refetch."""
        source = BlockingRateSource()
        cache = ExchangeRateCache(source, clock=clock)
        source.release.set()
        first = cache.get_snapshot()
        source.started.clear()
        source.release.clear()

        clock.advance(hours=24, minutes=1)
        threads, results, errors = _run_concurrently(cache, 8)

        threads[0].start()
        assert source.started.wait(timeout=5)
        for thread in threads[1:]:
            thread.start()
        time.sleep(0.05)
        source.release.set()
        for thread in threads:
            thread.join(timeout=5)

        assert errors == []
        assert len(results) == 8
        assert source.calls == 2
        assert all(result is results[0] for result in results)
        assert results[0] is not first
