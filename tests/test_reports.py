from datetime import date

import pytest

from expense_analysis.models import DateRange, Transaction
from expense_analysis.reports import (
    category_breakdown,
    exclude_internal,
    filter_by_range,
    period_label,
    resolve_granularity,
    round_half_up,
    spending_series,
    summarize,
    top_counterparties,
)


def _tx(i, day, amount, category="Ostatní", counterparty="", description="", internal=False):
    return Transaction(
        id=i,
        date=day,
        amount=amount,
        category=category,
        counterparty=counterparty,
        description=description,
        internal=internal,
    )


@pytest.fixture
def january():
    return [
        _tx(0, date(2025, 1, 28), 300.0, "Příjem", "ACME"),
        _tx(1, date(2025, 1, 20), -150.0, "Potraviny", "Albert"),
        _tx(2, date(2025, 1, 10), -50.0, "Restaurace", "", "Pizza Nuova Karlín a okolí a ještě něco"),
        _tx(3, date(2025, 1, 3), -100.0, "Potraviny", "Albert"),
        _tx(4, date(2025, 1, 2), -1000.0, "Převod", "Spořicí účet", internal=True),
    ]


def test_filter_by_range_is_inclusive(january):
    r = DateRange(start=date(2025, 1, 3), end=date(2025, 1, 20))
    assert [t.id for t in filter_by_range(january, r)] == [1, 2, 3]


def test_exclude_internal(january):
    assert [t.id for t in exclude_internal(january)] == [0, 1, 2, 3]


def test_summarize(january):
    s = summarize(exclude_internal(january))
    assert s.total_expenses == 300.0
    assert s.total_income == 300.0
    assert s.net_balance == 0.0
    assert s.expense_count == 3
    assert s.income_count == 1
    assert s.average_expense == 100.0


def test_summarize_empty():
    s = summarize([])
    assert (s.total_expenses, s.total_income, s.average_expense) == (0, 0, 0.0)


def test_category_breakdown(january):
    shares = category_breakdown(exclude_internal(january))
    assert [(s.name, s.value, s.count, s.percentage) for s in shares] == [
        ("Potraviny", 250, 2, "83.3"),
        ("Restaurace", 50, 1, "16.7"),
    ]


def test_category_breakdown_without_expenses():
    assert category_breakdown([_tx(0, date(2025, 1, 1), 10.0)]) == []


def test_category_breakdown_rounds_halves_up():
    [share] = category_breakdown([_tx(0, date(2025, 1, 1), -2.5, category="Potraviny")])
    assert share.value == 3


@pytest.mark.parametrize(
    "value, expected", [(2.5, 3), (0.5, 1), (1.4999, 1), (-2.5, -2), (-2.6, -3)]
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_top_counterparties(january):
    top = top_counterparties(exclude_internal(january))
    assert [(c.name, c.value, c.count, c.category) for c in top] == [
        ("Albert", 250, 2, "Potraviny"),
        ("Pizza Nuova Karlín a okol...", 50, 1, "Restaurace"),
    ]
    assert len(top_counterparties(january, limit=1)) == 1


def test_top_counterparties_unknown_label():
    [c] = top_counterparties([_tx(0, date(2025, 1, 1), -10.0)])
    assert c.name == "Unknown"


@pytest.mark.parametrize(
    "end, expected",
    [
        (date(2025, 2, 1), "daily"),
        (date(2025, 2, 2), "weekly"),
        (date(2025, 5, 1), "weekly"),
        (date(2025, 5, 2), "monthly"),
    ],
)
def test_resolve_granularity_auto(end, expected):
    assert resolve_granularity(DateRange(start=date(2025, 1, 1), end=end)) == expected


def test_resolve_granularity_explicit():
    r = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 2))
    assert resolve_granularity(r, "monthly") == "monthly"


def test_spending_series_daily_includes_empty_buckets():
    r = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 3))
    txs = [
        _tx(0, date(2025, 1, 3), 500.0),
        _tx(1, date(2025, 1, 3), -20.4),
        _tx(2, date(2025, 1, 1), -100.0),
        _tx(3, date(2025, 1, 9), -999.0),
    ]

    series = spending_series(txs, r)
    assert [(p.key, p.label, p.expenses, p.income) for p in series] == [
        ("2025-01-01", "1. Jan", 100, 0),
        ("2025-01-02", "2. Jan", 0, 0),
        ("2025-01-03", "3. Jan", 20, 500),
    ]


def test_spending_series_weekly_buckets_start_on_monday():
    r = DateRange(start=date(2025, 1, 1), end=date(2025, 3, 1))
    series = spending_series([_tx(0, date(2025, 1, 5), -40.0)], r)
    assert series[0].key == "2024-12-30"
    assert series[0].expenses == 40
    assert series[-1].key == "2025-02-24"
    assert len(series) == 9


def test_spending_series_monthly():
    r = DateRange(start=date(2025, 1, 15), end=date(2025, 6, 10))
    series = spending_series([_tx(0, date(2025, 3, 31), -75.0)], r)
    assert [p.label for p in series] == [
        "Jan 2025",
        "Feb 2025",
        "Mar 2025",
        "Apr 2025",
        "May 2025",
        "Jun 2025",
    ]
    assert series[2].expenses == 75


def test_spending_series_rejects_unknown_granularity():
    r = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 2))
    with pytest.raises(ValueError):
        spending_series([], r, "hourly")  # type: ignore[arg-type]


def test_period_label():
    r = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31))
    assert period_label(r) == "1 Jan 2025 – 31 Jan 2025"


def test_date_range_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        DateRange(start=date(2025, 2, 1), end=date(2025, 1, 1))
