"""Invoice domain service."""

from typing import Optional

from finledger.database.base import LedgerStore
from finledger.domain.entities import InvoiceConversion
from finledger.domain.errors import ValidationError
from finledger.rates.cache import ExchangeRateCache


class InvoiceService:
    """Service for invoice operations that need exchange rates."""

    def __init__(self, store: LedgerStore, rate_cache: ExchangeRateCache):
        """Initialize invoice service.

        Args:
            store: Ledger store instance
            rate_cache: Exchange rate cache used for conversions
        """
        self.store = store
        self.rate_cache = rate_cache

    def convert_invoice(
        self,
        user_id: int,
        invoice_id: int,
        currency: str,
        base_currency: str = "USD",
    ) -> Optional[InvoiceConversion]:
        """Express an invoice amount in another currency.

        Invoice amounts are recorded in ``base_currency``.

        Args:
            user_id: Owner of the invoice
            invoice_id: Invoice ID
            currency: Three-letter target currency code

        Returns:
            InvoiceConversion, or None if the invoice is not found for this user

        Raises:
            ValidationError: If the currency code is not three letters
            UpstreamUnavailable: If rates could not be refreshed
            UnknownCurrency: If the currency is not in the rate table
        """
        currency = currency.strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError(f"Currency code must be three letters, got '{currency}'")

        invoice = self.store.get_invoice(user_id, invoice_id)
        if invoice is None:
            return None

        converted = self.rate_cache.convert(invoice.amount, base_currency, currency)
        return InvoiceConversion(
            invoice_id=invoice.id,
            original_amount=invoice.amount,
            converted_amount=converted,
            currency=currency,
        )
