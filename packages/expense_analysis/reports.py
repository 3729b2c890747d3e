"""Aggregations over normalized transactions.

Pure functions feeding summary cards, the category breakdown, the top
spending list and the expense/income time series. Callers usually apply
:func:`filter_by_range` and :func:`exclude_internal` first; nothing here
filters implicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_FLOOR, Decimal
from typing import Literal

from .models import UNCATEGORIZED, DateRange, Transaction

type Granularity = Literal["auto", "daily", "weekly", "monthly"]

_MONTHS_SHORT = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def round_half_up(value: float) -> int:
    """Round to a whole number with halves going up (``2.5`` → 3, ``-2.5`` → -2)."""

    return int((Decimal(str(value)) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def filter_by_range(
    transactions: Iterable[Transaction], date_range: DateRange
) -> list[Transaction]:
    """Transactions whose date falls inside ``date_range`` (inclusive)."""

    return [t for t in transactions if date_range.contains(t.date)]


def exclude_internal(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if not t.internal]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Summary:
    total_expenses: float
    total_income: float
    net_balance: float
    expense_count: int
    income_count: int
    average_expense: float


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """Totals over the given transactions. Expenses are reported as positive sums."""

    items = list(transactions)
    expenses = [t for t in items if t.amount < 0]
    income = [t.amount for t in items if t.amount > 0]
    income_total = sum(income)
    income_count = len(income)
    expense_total = sum(abs(t.amount) for t in expenses)
    return Summary(
        total_expenses=expense_total,
        total_income=income_total,
        net_balance=income_total - expense_total,
        expense_count=len(expenses),
        income_count=income_count,
        average_expense=expense_total / len(expenses) if expenses else 0.0,
    )


# ---------------------------------------------------------------------------
# Category breakdown / top spending
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CategoryShare:
    name: str
    value: int
    count: int
    # Share of total expenses with one decimal ("12.5"); "0" when there are none.
    percentage: str


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryShare]:
    """Expenses grouped by category, largest first."""

    totals: dict[str, list[float]] = {}
    for t in transactions:
        if t.amount >= 0:
            continue
        bucket = totals.setdefault(t.category or UNCATEGORIZED, [0.0, 0])
        bucket[0] += abs(t.amount)
        bucket[1] += 1

    grand_total = sum(v[0] for v in totals.values())
    shares = [
        CategoryShare(
            name=name,
            value=round_half_up(total),
            count=int(count),
            percentage=f"{total / grand_total * 100:.1f}" if grand_total > 0 else "0",
        )
        for name, (total, count) in totals.items()
    ]
    shares.sort(key=lambda s: s.value, reverse=True)
    return shares


@dataclass(frozen=True, slots=True)
class CounterpartySpend:
    name: str
    value: int
    count: int
    category: str


def _spend_label(t: Transaction) -> str:
    return t.counterparty or t.description[:40] or "Unknown"


def top_counterparties(
    transactions: Iterable[Transaction], limit: int = 10
) -> list[CounterpartySpend]:
    """Largest expense recipients. The category is taken from the first
    transaction seen for each recipient."""

    groups: dict[str, tuple[float, int, str]] = {}
    for t in transactions:
        if t.amount >= 0:
            continue
        name = _spend_label(t)
        total, count, category = groups.get(name, (0.0, 0, t.category))
        groups[name] = (total + abs(t.amount), count + 1, category)

    items = [
        CounterpartySpend(
            name=name if len(name) <= 25 else name[:25] + "...",
            value=round_half_up(total),
            count=count,
            category=category,
        )
        for name, (total, count, category) in groups.items()
    ]
    items.sort(key=lambda c: c.value, reverse=True)
    return items[:limit]


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    key: str
    label: str
    expenses: int
    income: int


def resolve_granularity(date_range: DateRange, granularity: Granularity = "auto") -> str:
    """``auto``: daily up to 31 days, weekly up to 120 days, monthly beyond."""

    if granularity != "auto":
        return granularity
    if date_range.days <= 31:
        return "daily"
    if date_range.days <= 120:
        return "weekly"
    return "monthly"


def _bucket_start(day: date, granularity: str) -> date:
    if granularity == "weekly":
        # Weeks start on Monday.
        return day - timedelta(days=day.weekday())
    if granularity == "monthly":
        return day.replace(day=1)
    return day


def _next_bucket(start: date, granularity: str) -> date:
    if granularity == "weekly":
        return start + timedelta(days=7)
    if granularity == "monthly":
        return (start.replace(day=28) + timedelta(days=4)).replace(day=1)
    return start + timedelta(days=1)


def _bucket_label(start: date, granularity: str) -> str:
    if granularity == "monthly":
        return f"{_MONTHS_SHORT[start.month - 1]} {start.year}"
    return f"{start.day}. {_MONTHS_SHORT[start.month - 1]}"


def spending_series(
    transactions: Iterable[Transaction],
    date_range: DateRange,
    granularity: Granularity = "auto",
) -> list[SeriesPoint]:
    """Expense and income totals per bucket across ``date_range``.

    Every bucket in the range is present, including empty ones. Transactions
    outside the range are ignored. Values are rounded to whole units.
    """

    g = resolve_granularity(date_range, granularity)
    if g not in {"daily", "weekly", "monthly"}:
        raise ValueError(f"unknown granularity: {granularity!r}")

    buckets: dict[date, list[float]] = {}
    cur = _bucket_start(date_range.start, g)
    while cur <= date_range.end:
        buckets[cur] = [0.0, 0.0]
        cur = _next_bucket(cur, g)

    for t in transactions:
        if not date_range.contains(t.date):
            continue
        bucket = buckets.get(_bucket_start(t.date, g))
        if bucket is None:
            continue
        if t.amount < 0:
            bucket[0] += abs(t.amount)
        else:
            bucket[1] += t.amount

    return [
        SeriesPoint(
            key=start.isoformat(),
            label=_bucket_label(start, g),
            expenses=round_half_up(exp),
            income=round_half_up(inc),
        )
        for start, (exp, inc) in buckets.items()
    ]


def period_label(date_range: DateRange) -> str:
    """Human-readable period, e.g. ``"1 Jan 2025 – 31 Jan 2025"``."""

    def fmt(d: date) -> str:
        return f"{d.day} {_MONTHS_SHORT[d.month - 1]} {d.year}"

    return f"{fmt(date_range.start)} – {fmt(date_range.end)}"


__all__ = [
    "CategoryShare",
    "CounterpartySpend",
    "SeriesPoint",
    "Summary",
    "category_breakdown",
    "exclude_internal",
    "filter_by_range",
    "period_label",
    "resolve_granularity",
    "round_half_up",
    "spending_series",
    "summarize",
    "top_counterparties",
]
