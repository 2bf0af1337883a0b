"""Financial advice from a language model.

The model only ever sees a compact, read-only summary of the ledger. Failures
of the model client are turned into user-facing messages and logged; they
never propagate to the caller.
"""

from __future__ import annotations

import json
import os
from typing import Any

from openai import OpenAI

from cashpilot.database.mappers import transaction_to_document
from cashpilot.domain.entities import LedgerState
from cashpilot.domain.summary import active_loans, total_balance
from cashpilot.logging_setup import get_logger

logger = get_logger("cashpilot.domain.advice")

API_KEY_ENV = "OPENAI_API_KEY"
MODEL_ENV = "CASHPILOT_ADVICE_MODEL"
DEFAULT_MODEL = "gpt-4o-mini"

RECENT_TRANSACTION_LIMIT = 20

MISSING_KEY_MESSAGE = "API Key not configured. Please set OPENAI_API_KEY to get insights."
EMPTY_RESPONSE_MESSAGE = "Could not generate insights at this time."
ERROR_MESSAGE = "Sorry, I encountered an error analyzing your data."

_PROMPT_TEMPLATE = """\
You are a financial advisor for the app "Cash Pilot".
Analyze the following user financial summary JSON and provide 3 brief, actionable insights or warnings.
Focus on spending habits, loan risks (overdue or high interest), and saving opportunities.
Keep it friendly and encouraging.

Data:
{data}
"""


def build_summary(state: LedgerState) -> dict[str, Any]:
    """Summarize the ledger for the model, keeping the payload small."""
    return {
        "totalBalance": str(total_balance(state)),
        "transactionCount": len(state.transactions),
        "recentTransactions": [
            transaction_to_document(t) for t in state.transactions[:RECENT_TRANSACTION_LIMIT]
        ],
        "activeLoans": [
            {
                "type": loan.type.value,
                "counterparty": loan.counterparty,
                "amount": str(loan.principal),
                "due": loan.due_date.isoformat(),
            }
            for loan in active_loans(state)
        ],
        "currency": state.settings.currency,
    }


def build_prompt(summary: dict[str, Any]) -> str:
    return _PROMPT_TEMPLATE.format(data=json.dumps(summary, indent=2))


class AdviceService:
    """Service for generating advice text from a ledger summary."""

    def __init__(self, client: Any | None = None, model: str | None = None):
        """Initialize advice service.

        Args:
            client: An ``openai.OpenAI``-compatible client. When omitted, one
                is created if ``OPENAI_API_KEY`` is set.
            model: Model name (defaults to ``CASHPILOT_ADVICE_MODEL`` or
                ``DEFAULT_MODEL``)
        """
        if client is None and os.environ.get(API_KEY_ENV):
            client = OpenAI()
        self.client = client
        self.model = model or os.environ.get(MODEL_ENV) or DEFAULT_MODEL

    def generate_advice(self, state: LedgerState) -> str:
        """Return advice text, or a message explaining why there is none."""
        if self.client is None:
            return MISSING_KEY_MESSAGE

        prompt = build_prompt(build_summary(state))
        try:
            response = self.client.responses.create(model=self.model, input=prompt)
        except Exception:  # noqa: BLE001 - any client failure becomes a message
            logger.exception("Advice request failed")
            return ERROR_MESSAGE

        text = getattr(response, "output_text", None)
        if not isinstance(text, str) or not text.strip():
            return EMPTY_RESPONSE_MESSAGE
        return text.strip()
