"""Utility functions for cashpilot."""

from cashpilot.utils.date_parser import parse_date, get_date_range
from cashpilot.utils.amount_parser import parse_amount, parse_rate
from cashpilot.utils.account_resolver import resolve_account

__all__ = ["parse_date", "get_date_range", "parse_amount", "parse_rate", "resolve_account"]
