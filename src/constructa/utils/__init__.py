"""Utility functions for constructa."""

from constructa.utils.date_parser import parse_date, parse_month
from constructa.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_amount"]
