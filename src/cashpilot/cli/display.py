"""Display helpers shared by CLI commands."""

from decimal import Decimal


def format_money(amount: Decimal, currency: str) -> str:
    """Format an amount as e.g. ``USD 1,234.50`` or ``USD -20.00``."""
    return f"{currency} {amount:,.2f}"


def short_id(identifier: str, length: int = 12) -> str:
    """Shorten a generated id for table display."""
    return identifier if len(identifier) <= length else identifier[:length]
