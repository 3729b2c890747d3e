"""Category taxonomy and keyword-based category inference.

The built-in taxonomy (display colors, icons and English labels) is a
process-wide constant exposed as a read-only mapping. User-added categories
live outside it: callers pass them to :func:`merge_taxonomy` to get the
effective list, and the built-in table is never mutated.

Exports
-------
- ``infer_category(...)``: keyword rules for descriptions from exports that
  carry no category column.
- ``get_category_color(...)`` / ``get_category_icon(...)``: display helpers
  with deterministic fallbacks for unknown (user-added) names.
- ``normalize_name(...)`` / ``validate_name(...)``: checks applied before a
  user-added category is persisted.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .models import UNCATEGORIZED

# ---------------------------
# Built-in taxonomy
# ---------------------------


@dataclass(frozen=True, slots=True)
class CategoryInfo:
    color: str
    icon: str
    en: str


CATEGORY_CONFIG: Mapping[str, CategoryInfo] = MappingProxyType(
    {
        "Potraviny": CategoryInfo("#10b981", "🛒", "Groceries"),
        "Restaurace": CategoryInfo("#f59e0b", "🍽️", "Restaurants"),
        "Tankování": CategoryInfo("#6366f1", "⛽", "Fuel"),
        "Doprava": CategoryInfo("#8b5cf6", "🚗", "Transport"),
        "Provoz domácnosti": CategoryInfo("#ec4899", "🏠", "Housing"),
        "Vybavení domácnosti": CategoryInfo("#14b8a6", "🪑", "Home Furnishing"),
        "Energie": CategoryInfo("#f97316", "⚡", "Energy"),
        "TV, internet, telefon": CategoryInfo("#06b6d4", "📱", "Telecom"),
        "Nákupy a služby": CategoryInfo("#a855f7", "🛍️", "Shopping"),
        "Splátky": CategoryInfo("#ef4444", "💳", "Installments"),
        "Vzdělání": CategoryInfo("#3b82f6", "📚", "Education"),
        "Zábava": CategoryInfo("#d946ef", "🎬", "Entertainment"),
        "Zdraví": CategoryInfo("#22c55e", "🏥", "Health"),
        "Oblečení": CategoryInfo("#e11d48", "👕", "Clothing"),
        "Příjem": CategoryInfo("#059669", "💰", "Income"),
        "Převod": CategoryInfo("#64748b", "🔄", "Transfer"),
        UNCATEGORIZED: CategoryInfo("#78716c", "📦", "Other"),
        "Odchozí nezatříděná": CategoryInfo("#94a3b8", "📤", "Uncategorized Outgoing"),
        "Volný čas a zábava": CategoryInfo("#d946ef", "🎮", "Leisure & Entertainment"),
        "Spoření a investice": CategoryInfo("#0ea5e9", "📈", "Savings & Investments"),
    }
)

_FALLBACK_COLORS: tuple[str, ...] = (
    "#0ea5e9",
    "#84cc16",
    "#eab308",
    "#f43f5e",
    "#7c3aed",
    "#0891b2",
    "#c026d3",
    "#ea580c",
    "#16a34a",
    "#2563eb",
)
_FALLBACK_ICON = "📦"


def _to_int32(n: int) -> int:
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


def _string_hash(s: str) -> int:
    # Classic ``hash * 31 + code`` over UTF-16 code units, wrapped to int32 on
    # every step so colors stay stable across platforms.
    h = 0
    data = s.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = _to_int32(code + _to_int32((h << 5) - h))
    return h


def get_category_color(category: str) -> str:
    info = CATEGORY_CONFIG.get(category)
    if info is not None:
        return info.color
    return _FALLBACK_COLORS[abs(_string_hash(category)) % len(_FALLBACK_COLORS)]


def get_category_icon(category: str) -> str:
    info = CATEGORY_CONFIG.get(category)
    return info.icon if info is not None else _FALLBACK_ICON


def get_all_categories() -> list[str]:
    """Built-in category names in table order."""

    return list(CATEGORY_CONFIG)


# ---------------------------
# Keyword inference
# ---------------------------

# Checked top to bottom; the first rule with a keyword contained in the
# lower-cased description wins.
_KEYWORD_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Potraviny",
        (
            "rohlik",
            "albert",
            "billa",
            "tesco",
            "lidl",
            "kaufland",
            "penny",
            "potraviny",
            "coop",
            "globus",
            "bakehouse",
            "pekarna",
            "pekárna",
        ),
    ),
    (
        "Restaurace",
        (
            "restaura",
            "mcdonald",
            "burger",
            "kfc",
            "pizza",
            "foodora",
            "wolt",
            "bolt food",
            "starbucks",
            "costa",
        ),
    ),
    ("Tankování", ("benzin", "orlen", "mol", "shell", "eni", "čerpací", "tank", "fuel")),
    ("Energie", ("čez", "cez", "energie", "eon", "pražská plynárenská", "innogy", "plyn")),
    (
        "TV, internet, telefon",
        ("t-mobile", "vodafone", "o2", "upc", "netflix", "spotify", "hbo", "nova", "internet"),
    ),
    ("Vybavení domácnosti", ("ikea", "hornbach", "obi", "bauhaus", "baumax", "jysk")),
    ("Provoz domácnosti", ("nájem", "najem", "hypot")),
    ("Splátky", ("leasing", "splátk", "spláce", "úvěr")),
    ("Doprava", ("vlak", "bus", "jízden", "uber", "liftago", "easyjet", "ryanair", "letušk")),
    ("Zdraví", ("lékárna", "lekarna", "doktor", "nemocni", "zdraví", "clinic")),
    ("Zábava", ("kino", "cinema", "divadlo", "koncert", "festival", "vstupné")),
    ("Nákupy a služby", ("apple.com", "google", "amazon", "alza", "czc", "mall.cz", "notino")),
)


def infer_category(description: str | None) -> str:
    """Guess a category from free text; ``Ostatní`` when no rule matches.

    Matching is plain substring containment, so short keywords ("mol", "eni",
    "o2") can fire inside unrelated words. Rule order decides ties.
    """

    desc = (description or "").lower()
    for category, keywords in _KEYWORD_RULES:
        if any(kw in desc for kw in keywords):
            return category
    return UNCATEGORIZED


# ---------------------------
# User-added categories
# ---------------------------


def normalize_name(name: str) -> str:
    """Return a trimmed, single-spaced representation of ``name``.

    Does not change case.
    """

    return " ".join(name.strip().split())


@dataclass(frozen=True, slots=True)
class NameValidation:
    ok: bool
    reason: str | None = None


_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def validate_name(name: str, *, min_len: int = 1, max_len: int = 64) -> NameValidation:
    """Validate a user-added category name.

    Rules
    -----
    - Trim whitespace; enforce length bounds 1..64.
    - No control characters. Letters with diacritics and punctuation such as
      ``,`` are allowed, since the built-in names use both.
    """

    n = normalize_name(name)
    if len(n) < min_len:
        return NameValidation(False, "Name cannot be empty")
    if len(n) > max_len:
        return NameValidation(False, f"Name must be at most {max_len} characters")
    if _CONTROL_RE.search(n):
        return NameValidation(False, "Name must not contain control characters")
    return NameValidation(True, None)


def merge_taxonomy(custom: Iterable[str] = ()) -> list[str]:
    """Return built-in names followed by valid user-added names.

    Duplicates (case-insensitive, against built-ins and earlier custom
    entries) and invalid names are skipped.
    """

    merged = get_all_categories()
    seen = {n.casefold() for n in merged}
    for raw in custom:
        if not isinstance(raw, str) or not validate_name(raw).ok:
            continue
        n = normalize_name(raw)
        if n.casefold() in seen:
            continue
        seen.add(n.casefold())
        merged.append(n)
    return merged


__all__ = [
    "CATEGORY_CONFIG",
    "CategoryInfo",
    "NameValidation",
    "get_all_categories",
    "get_category_color",
    "get_category_icon",
    "infer_category",
    "merge_taxonomy",
    "normalize_name",
    "validate_name",
]
