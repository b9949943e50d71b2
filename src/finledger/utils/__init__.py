"""Utility functions for finledger."""

from finledger.utils.date_parser import parse_date, get_date_range
from finledger.utils.amount_parser import parse_amount, quantize_amount

__all__ = ["parse_date", "get_date_range", "parse_amount", "quantize_amount"]
