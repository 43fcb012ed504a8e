"""Exchange rate lookup and caching."""

import os
from typing import Optional

from finledger.rates.cache import ExchangeRateCache, DEFAULT_MAX_AGE
from finledger.rates.source import (
    DEFAULT_RATES_URL,
    DEFAULT_TIMEOUT,
    OpenExchangeRateSource,
    RateSource,
)


def create_exchange_rate_cache(url: Optional[str] = None, timeout: Optional[float] = None) -> ExchangeRateCache:
    """Create a rate cache backed by the HTTP rate source.

    Args:
        url: Rate endpoint. If None, checks FINLEDGER_RATES_URL, then uses the default
        timeout: Request timeout in seconds. If None, checks FINLEDGER_RATES_TIMEOUT

    Returns:
        ExchangeRateCache with a 24 hour freshness window
    """
    url = url or os.environ.get("FINLEDGER_RATES_URL") or DEFAULT_RATES_URL
    if timeout is None:
        timeout = float(os.environ.get("FINLEDGER_RATES_TIMEOUT", DEFAULT_TIMEOUT))
    return ExchangeRateCache(OpenExchangeRateSource(url=url, timeout=timeout))


__all__ = [
    "ExchangeRateCache",
    "OpenExchangeRateSource",
    "RateSource",
    "DEFAULT_MAX_AGE",
    "create_exchange_rate_cache",
]
