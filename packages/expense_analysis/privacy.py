"""Privacy-mode masking for display and screenshots.

Masking only changes text fields shown to the user. Amounts keep their value
so totals and charts still compute; :func:`format_amount` hides them at
render time instead.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace

from .models import Transaction
from .reports import round_half_up

MASKED_AMOUNT = "****"

# cs-CZ number formatting groups thousands with a no-break space.
_NBSP = "\u00a0"


def format_amount(amount: float, privacy_mode: bool = False) -> str:
    """Whole-unit CZK string, or ``****`` in privacy mode.

    Thousands and the currency are separated by a no-break space
    (``"-1\u00a0235\u00a0Kč"``). Halves round up, so ``-2.5`` becomes ``-2``.
    """

    if privacy_mode:
        return MASKED_AMOUNT
    rounded = round_half_up(amount)
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,}".replace(",", _NBSP)
    return f"{sign}{grouped}{_NBSP}Kč"


def mask_string(s: str, min_length: int = 3) -> str:
    """Keep a hint of ``s``: first two and last character for longer strings."""

    if not s or len(s) <= min_length:
        return "***"
    if len(s) <= 5:
        return s[0] + "***"
    return s[:2] + "***" + s[-1]


def mask_counterparty(name: str) -> str:
    if not name or not name.strip():
        return ""
    return mask_string(name, 2)


def mask_description(desc: str) -> str:
    """Keep the first two words, mask the rest."""

    if not desc or not desc.strip():
        return ""
    words = re.split(r"\s+", desc)
    if len(words) <= 2:
        return mask_string(desc, 3)
    return " ".join(words[:2]) + " ***"


def mask_transaction(t: Transaction) -> Transaction:
    """Return a masked copy of ``t``; the original is left untouched."""

    return replace(
        t,
        counterparty=mask_counterparty(t.counterparty),
        description=mask_description(t.description),
        note=mask_description(t.note) if t.note else t.note,
    )


def mask_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [mask_transaction(t) for t in transactions]


__all__ = [
    "MASKED_AMOUNT",
    "format_amount",
    "mask_counterparty",
    "mask_description",
    "mask_string",
    "mask_transaction",
    "mask_transactions",
]
