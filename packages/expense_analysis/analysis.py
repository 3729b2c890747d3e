"""AI spending analysis over a reduced transaction projection.

Only ``amount`` and ``category`` of each transaction leave the process;
counterparties, descriptions and account data are never sent. The model's
answer is free text and is returned verbatim.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from typing import Any

from openai import OpenAI, OpenAIError

from .logging_setup import get_logger
from .models import Transaction

_MODEL_DEFAULT = "gpt-4o-mini"
_MAX_OUTPUT_TOKENS = 1024

ENV_API_KEY = "OPENAI_API_KEY"
ENV_MODEL = "EXPENSE_ANALYSIS_MODEL"

SYSTEM_PROMPT = (
    "You are a helpful spending analyst. The user will send you a list of "
    "transactions for a period. Each transaction has only:\n"
    "- amount: number in CZK (negative = expense, positive = income)\n"
    "- category: the category assigned by the user\n\n"
    "Analyze how they are doing: total spending vs income, spending by category, "
    "any notable patterns, and brief practical suggestions to improve or keep on "
    "track. Be concise and friendly. Write in the same language the user uses for "
    "categories (if Czech, respond in Czech; otherwise English)."
)

_logger = get_logger("expense_analysis.analysis")


def spending_payload(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    """Project transactions to ``{"amount", "category"}`` pairs."""

    return [{"amount": t.amount, "category": t.category} for t in transactions]


def build_user_content(transactions: Iterable[Transaction], period_label: str) -> str:
    payload = json.dumps(spending_payload(transactions), ensure_ascii=False, separators=(",", ":"))
    return (
        f"Period: {period_label}\n\n"
        f"Transactions (amount in CZK, category):\n{payload}"
    )


def _extract_text(resp: Any) -> str | None:
    text = getattr(resp, "output_text", None)
    return text if isinstance(text, str) and text.strip() else None


def get_spending_analysis(
    transactions: Iterable[Transaction],
    period_label: str,
    *,
    api_key: str | None = None,
    model: str | None = None,
) -> str:
    """Ask the model for a short spending review of ``transactions``.

    Parameters
    ----------
    transactions:
        Usually the user's current selection with internal transfers removed.
    period_label:
        Human-readable period, e.g. ``"1 Jan 2025 – 31 Jan 2025"``.
    api_key:
        Overrides ``OPENAI_API_KEY``.
    model:
        Overrides ``EXPENSE_ANALYSIS_MODEL`` (default ``gpt-4o-mini``).

    Raises
    ------
    RuntimeError
        No API key is configured, the API call failed, or the response
        carried no text.
    """

    key = (api_key or os.getenv(ENV_API_KEY) or "").strip()
    if not key:
        raise RuntimeError(f"{ENV_API_KEY} is required for spending analysis")

    items = list(transactions)
    model_name = model or os.getenv(ENV_MODEL) or _MODEL_DEFAULT
    client = OpenAI(api_key=key)
    _logger.info("requesting spending analysis for %d transaction(s) (%s)", len(items), model_name)
    try:
        resp = client.responses.create(
            model=model_name,
            instructions=SYSTEM_PROMPT,
            input=build_user_content(items, period_label),
            max_output_tokens=_MAX_OUTPUT_TOKENS,
        )
    except OpenAIError as e:
        raise RuntimeError(f"OpenAI API error: {e}") from e

    text = _extract_text(resp)
    if text is None:
        raise RuntimeError("No response from OpenAI.")
    return text


__all__ = [
    "SYSTEM_PROMPT",
    "build_user_content",
    "get_spending_analysis",
    "spending_payload",
]
