"""Tests for the advice service.

The OpenAI client is replaced by a small stub with the same
``client.responses.create(...)`` shape, so nothing leaves the process.
"""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

import pytest

from cashpilot.domain import ledger
from cashpilot.domain.advice import (
    EMPTY_RESPONSE_MESSAGE,
    ERROR_MESSAGE,
    MISSING_KEY_MESSAGE,
    AdviceService,
    build_prompt,
    build_summary,
)
from cashpilot.domain.entities import LoanDraft, LoanType, TransactionType, default_state


class ResponsesStub:
    """Records calls and returns a canned response, or raises."""

    def __init__(self, output_text: Any = "Save more.", error: Exception | None = None) -> None:
        self.output_text = output_text
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


def client_with(responses: ResponsesStub) -> SimpleNamespace:
    return SimpleNamespace(responses=responses)


@pytest.fixture
def state(make_txn):
    """Default ledger with 25 transactions and one active loan."""
    current = default_state()
    for i in range(25):
        current = ledger.add_transaction(
            current, make_txn(f"t{i}", "10", TransactionType.INCOME, "acc_1")
        )
    return ledger.add_loan(
        current,
        LoanDraft(
            type=LoanType.TAKEN,
            counterparty="Bank",
            principal=Decimal("1000"),
            start_date=date(2024, 1, 1),
            due_date=date(2024, 12, 31),
        ),
        loan_id="loan_1",
    )


def test_summary_is_compact(state):
    summary = build_summary(state)

    assert summary["totalBalance"] == "1250"
    assert summary["transactionCount"] == 26
    assert len(summary["recentTransactions"]) == 20
    assert summary["activeLoans"] == [
        {"type": "TAKEN", "counterparty": "Bank", "amount": "1000", "due": "2024-12-31"}
    ]
    assert summary["currency"] == "USD"


def test_prompt_embeds_summary_json(state):
    summary = build_summary(state)
    prompt = build_prompt(summary)
    assert json.dumps(summary, indent=2) in prompt


def test_generate_advice_returns_model_text(state):
    responses = ResponsesStub(output_text="  Spend less on coffee.\n")
    service = AdviceService(client=client_with(responses), model="test-model")

    assert service.generate_advice(state) == "Spend less on coffee."
    assert responses.calls[0]["model"] == "test-model"
    assert '"transactionCount": 26' in responses.calls[0]["input"]


def test_generate_advice_does_not_change_state(state):
    before = replace(state)
    AdviceService(client=client_with(ResponsesStub())).generate_advice(state)
    assert state == before


def test_missing_key(monkeypatch, state):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert AdviceService().generate_advice(state) == MISSING_KEY_MESSAGE


def test_empty_response(state):
    service = AdviceService(client=client_with(ResponsesStub(output_text="")))
    assert service.generate_advice(state) == EMPTY_RESPONSE_MESSAGE


def test_client_error_becomes_message(state):
    service = AdviceService(client=client_with(ResponsesStub(error=RuntimeError("boom"))))
    assert service.generate_advice(state) == ERROR_MESSAGE


def test_model_from_environment(monkeypatch):
    monkeypatch.setenv("CASHPILOT_ADVICE_MODEL", "env-model")
    service = AdviceService(client=client_with(ResponsesStub()))
    assert service.model == "env-model"
