"""Tests for amount parsing and account resolution."""

from decimal import Decimal

import pytest

from cashpilot.domain.entities import Account, LedgerState
from cashpilot.utils.account_resolver import resolve_account
from cashpilot.utils.amount_parser import parse_amount, parse_rate


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("€ 99", Decimal("99")),
        ("0", Decimal("0")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "-5", "NaN", "Infinity"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_rate_strips_percent():
    assert parse_rate("7.5%") == Decimal("7.5")
    assert parse_rate("10") == Decimal("10")


class TestResolveAccount:
    """Resolving an account by id, name or list position."""

    @pytest.fixture
    def state(self):
        return LedgerState(
            accounts=(
                Account(id="acc_1", name="Main Wallet", currency="USD"),
                Account(id="acc_x", name="Savings", currency="EUR"),
            )
        )

    def test_by_id(self, state):
        assert resolve_account(state, "acc_x") == "acc_x"

    def test_by_name(self, state):
        assert resolve_account(state, "Savings") == "acc_x"

    def test_by_position(self, state):
        assert resolve_account(state, "1") == "acc_1"
        assert resolve_account(state, "2") == "acc_x"

    def test_position_out_of_range(self, state):
        with pytest.raises(ValueError, match="#3"):
            resolve_account(state, "3")

    def test_unknown(self, state):
        with pytest.raises(ValueError, match="not found"):
            resolve_account(state, "Checking")
