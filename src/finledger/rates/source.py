"""Exchange rate sources."""

from abc import ABC, abstractmethod
from datetime import datetime, UTC
from typing import Callable, Optional

import requests
from dateutil import parser as date_parser

from finledger.domain.entities import ExchangeRateSnapshot
from finledger.domain.errors import UpstreamUnavailable

DEFAULT_RATES_URL = "https://open.er-api.com/v6/latest/USD"
DEFAULT_TIMEOUT = 10.0


class RateSource(ABC):
    """Something that can produce a fresh snapshot of USD-based rates."""

    @abstractmethod
    def fetch(self) -> ExchangeRateSnapshot:
        """Fetch current rates.

        Raises:
            UpstreamUnavailable: If the rates cannot be obtained
        """
        pass


class OpenExchangeRateSource(RateSource):
    """Rates from an open.er-api.com style endpoint.

    The endpoint answers with ``{"result": "success", "rates": {...},
    "time_last_update_utc": "..."}``.
    """

    def __init__(
        self,
        url: str = DEFAULT_RATES_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._clock = clock

    def fetch(self) -> ExchangeRateSnapshot:
        """Fetch current rates from the endpoint."""
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as e:
            raise UpstreamUnavailable(f"Rate source timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"Rate source request failed: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailable(f"Rate source returned invalid JSON: {e}") from e

        return self._parse(payload)

    def _parse(self, payload) -> ExchangeRateSnapshot:
        if not isinstance(payload, dict):
            raise UpstreamUnavailable("Rate source returned an unexpected payload")
        result = payload.get("result", "success")
        if result != "success":
            detail = payload.get("error-type") or result
            raise UpstreamUnavailable(f"Rate source reported an error: {detail}")

        rates = payload.get("rates")
        if not isinstance(rates, dict) or not rates:
            raise UpstreamUnavailable("Rate source returned no rates")
        try:
            parsed_rates = {str(code).upper(): float(rate) for code, rate in rates.items()}
        except (TypeError, ValueError) as e:
            raise UpstreamUnavailable(f"Rate source returned a non-numeric rate: {e}") from e

        return ExchangeRateSnapshot(
            rates=parsed_rates,
            fetched_at=self._clock(),
            source_updated_at=_parse_timestamp(payload.get("time_last_update_utc")),
        )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise UpstreamUnavailable(
            f"Rate source returned a non-text update time: {type(value).__name__}"
        )
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None
