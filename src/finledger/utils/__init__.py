"""Utility modules for finledger."""

from finledger.utils.amount_parser import parse_amount, quantize_amount, to_decimal
from finledger.utils.date_parser import parse_date

__all__ = ["parse_amount", "quantize_amount", "to_decimal", "parse_date"]
