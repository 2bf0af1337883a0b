"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money amount string into a non-negative Decimal.

    Handles "123.45", "$123.45", "1,234.56" and "€ 99". Amounts are unsigned in
    the ledger, the direction comes from the transaction type, so signed input
    is rejected.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$€£¥₹,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount


def parse_rate(rate_str: str) -> Decimal:
    """Parse an interest rate percentage such as "10", "7.5" or "7.5%"."""
    return parse_amount(rate_str.strip().rstrip("%"))
