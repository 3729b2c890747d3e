"""CLI for the ``expense_analysis`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands below are thin wrappers. Environment variables (notably
``OPENAI_API_KEY`` and ``EXPENSE_ANALYSIS_DB_URL``) are loaded from a local
``.env`` by ``python-dotenv`` in the root callback.

Commands that take no CSV path work on the statement saved with
``parse --save``. Privacy mode (``privacy on``) masks text fields and amounts
in everything they print.

Errors are reported as ``Error: <message>`` on stderr with exit code 1.
"""

from __future__ import annotations

import sys
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo

from .logging_setup import configure_logging, get_logger
from .models import DateRange, ParsedData, Transaction

_logger = get_logger("expense_analysis.cli")


def _load(csv_path: str) -> ParsedData | None:
    """Parse ``csv_path``; print the error and return ``None`` on failure."""

    from .errors import FileIntakeError, StatementParseError
    from .pipeline import parse_statement_file

    try:
        return parse_statement_file(csv_path)
    except (FileIntakeError, StatementParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def _load_view(csv_path: str | None) -> tuple[ParsedData, DateRange, bool] | None:
    """Data, viewed range and privacy flag for a file or, without one, the store."""

    from .errors import StoreError
    from .storage import LocalStore

    store = LocalStore()
    try:
        privacy_mode = store.load_privacy_mode()
        if csv_path is not None:
            data = _load(csv_path)
            return (data, data.date_range, privacy_mode) if data is not None else None
        restored = store.load()
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    if restored is None:
        print("Error: no statement is stored; run `parse --save` first", file=sys.stderr)
        return None
    return restored.data, restored.selected_range, privacy_mode


def cmd_parse(csv_path: str, *, as_json: bool = False, save: bool = False) -> int:
    """Parse a statement and print its transactions.

    Text output: a header line ``<bank>\\t<from>\\t<to>\\t<count>`` followed by
    one ``<id>\\t<date>\\t<amount>\\t<category>\\t<description>`` line per
    transaction. ``--json`` prints the storage JSON document instead.
    """

    from .errors import StoreError
    from .storage import LocalStore, serialize_parsed_data

    data = _load(csv_path)
    if data is None:
        return 1

    if as_json:
        print(serialize_parsed_data(data))
    else:
        r = data.date_range
        print(f"{data.bank_name}\t{r.start}\t{r.end}\t{len(data.transactions)}")
        for t in data.transactions:
            print(f"{t.id}\t{t.date}\t{t.amount:.2f}\t{t.category}\t{t.description}")

    if save:
        try:
            LocalStore().save(data, data.date_range)
        except StoreError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        _logger.info("saved %d transaction(s) to the local store", len(data.transactions))
    return 0


def cmd_summary(csv_path: str | None = None, *, include_internal: bool = False) -> int:
    """Print totals and the expense breakdown by category.

    Without ``csv_path`` the stored statement is summarized over its selected
    range.
    """

    from .privacy import MASKED_AMOUNT, format_amount
    from .reports import (
        category_breakdown,
        exclude_internal,
        filter_by_range,
        period_label,
        summarize,
    )

    view = _load_view(csv_path)
    if view is None:
        return 1
    data, selected, privacy_mode = view

    txs = filter_by_range(data.transactions, selected)
    if not include_internal:
        txs = exclude_internal(txs)
    s = summarize(txs)

    def amount(value: float) -> str:
        return format_amount(value, privacy_mode)

    print(f"Bank: {data.bank_name}")
    print(f"Period: {period_label(selected)}")
    print(f"Total expenses: {amount(s.total_expenses)} ({s.expense_count} transactions)")
    print(f"Total income: {amount(s.total_income)} ({s.income_count} transactions)")
    print(f"Net balance: {amount(s.net_balance)}")
    print(f"Average expense: {amount(s.average_expense)}")
    for share in category_breakdown(txs):
        value = MASKED_AMOUNT if privacy_mode else share.value
        print(f"{share.name}\t{value}\t{share.percentage}%\t{share.count}")
    return 0


def _parse_day(raw: str, label: str) -> date:
    from .locale_parsers import parse_date

    day = parse_date(raw)
    if day is None:
        raise ValueError(f"unreadable {label} date: {raw!r}")
    return day


def cmd_show(*, date_from: str | None = None, date_to: str | None = None) -> int:
    """List the stored transactions inside the selected range.

    ``--from``/``--to`` change the selected range and store it. Output: a
    header line ``<bank>\\t<from>\\t<to>\\t<count>`` followed by one
    ``<id>\\t<date>\\t<amount>\\t<category>\\t<counterparty or description>``
    line per transaction, with a trailing ``internal`` column on internal
    transfers.
    """

    from .errors import StoreError
    from .privacy import format_amount, mask_transactions
    from .reports import filter_by_range
    from .storage import LocalStore

    view = _load_view(None)
    if view is None:
        return 1
    data, selected, privacy_mode = view

    if date_from is not None or date_to is not None:
        try:
            start = _parse_day(date_from, "--from") if date_from else selected.start
            end = _parse_day(date_to, "--to") if date_to else selected.end
            selected = DateRange(start=start, end=end)
            LocalStore().set_selected_range(selected)
        except (ValueError, LookupError, StoreError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    txs: list[Transaction] = filter_by_range(data.transactions, selected)
    if privacy_mode:
        txs = mask_transactions(txs)

    print(f"{data.bank_name}\t{selected.start}\t{selected.end}\t{len(txs)}")
    for t in txs:
        cols = [
            str(t.id),
            t.date.isoformat(),
            format_amount(t.amount, privacy_mode),
            t.category,
            t.counterparty or t.description,
        ]
        if t.internal:
            cols.append("internal")
        print("\t".join(cols))
    return 0


def cmd_set_category(tx_id: int, name: str) -> int:
    """Assign one of the effective categories to a stored transaction."""

    from .categories import merge_taxonomy, normalize_name
    from .errors import StoreError
    from .storage import LocalStore

    store = LocalStore()
    try:
        taxonomy = merge_taxonomy(store.load_custom_categories())
        wanted = normalize_name(name).casefold()
        canonical = next((c for c in taxonomy if c.casefold() == wanted), None)
        if canonical is None:
            print(f"Error: unknown category: {name}", file=sys.stderr)
            return 1
        t = store.set_category(tx_id, canonical)
    except (LookupError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"{t.id}\t{t.category}")
    return 0


def cmd_toggle_internal(tx_id: int) -> int:
    """Flip the internal-transfer flag of a stored transaction."""

    from .errors import StoreError
    from .storage import LocalStore

    try:
        t = LocalStore().toggle_internal(tx_id)
    except (LookupError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"{t.id}\t{'internal' if t.internal else 'external'}")
    return 0


def cmd_privacy(state: bool | None = None) -> int:
    """Print privacy mode, or switch it on/off first when ``state`` is given."""

    from .errors import StoreError
    from .storage import LocalStore

    store = LocalStore()
    try:
        if state is not None:
            store.save_privacy_mode(state)
        enabled = store.load_privacy_mode()
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Privacy mode: {'on' if enabled else 'off'}")
    return 0


def cmd_clear() -> int:
    """Forget the stored statement. Categories and privacy mode are kept."""

    from .errors import StoreError
    from .storage import LocalStore

    try:
        LocalStore().clear()
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _logger.info("cleared the stored statement")
    return 0


def cmd_analyze(csv_path: str | None = None, *, model: str | None = None) -> int:
    """Send the amount/category projection to the analysis model and print its reply.

    Without ``csv_path`` the stored statement is analyzed over its selected
    range.
    """

    from .analysis import get_spending_analysis
    from .reports import exclude_internal, filter_by_range, period_label

    view = _load_view(csv_path)
    if view is None:
        return 1
    data, selected, _ = view
    try:
        text = get_spending_analysis(
            exclude_internal(filter_by_range(data.transactions, selected)),
            period_label(selected),
            model=model,
        )
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(text)
    return 0


def cmd_categories(*, add: str | None = None) -> int:
    """List the effective taxonomy; optionally persist a new user category."""

    from .categories import merge_taxonomy, normalize_name, validate_name
    from .errors import StoreError
    from .storage import LocalStore

    store = LocalStore()
    try:
        custom = store.load_custom_categories()
        if add is not None:
            check = validate_name(add)
            if not check.ok:
                print(f"Error: {check.reason}", file=sys.stderr)
                return 1
            name = normalize_name(add)
            if name.casefold() in {c.casefold() for c in merge_taxonomy(custom)}:
                print(f"Error: category already exists: {name}", file=sys.stderr)
                return 1
            custom.append(name)
            store.save_custom_categories(custom)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name in merge_taxonomy(custom):
        print(name)
    return 0


# ---- Typer wiring -------------------------------------------------------------

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Normalize Czech bank statement CSV exports and summarize spending.",
)

# Module-level argument objects to satisfy ruff B008 (no calls in defaults).
CSV_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to a bank statement CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # intake checks report missing files themselves
)
STORED_OR_CSV_ARGUMENT: ArgumentInfo = typer.Argument(
    help="Path to a bank statement CSV export (default: the stored statement)",
    dir_okay=False,
    file_okay=True,
    exists=False,
)


class PrivacyState(str, Enum):
    on = "on"
    off = "off"


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


def _opt_str(path: Path | None) -> str | None:
    return str(path) if path is not None else None


@app.command("parse")
def parse_cmd(
    csv_path: Annotated[Path, CSV_PATH_ARGUMENT],
    *,
    as_json: bool = typer.Option(False, "--json", help="Print the storage JSON document."),
    save: bool = typer.Option(False, help="Save the parsed data to the local store."),
) -> None:
    _exit(cmd_parse(str(csv_path), as_json=as_json, save=save))


@app.command("summary")
def summary_cmd(
    csv_path: Annotated[Path | None, STORED_OR_CSV_ARGUMENT] = None,
    *,
    include_internal: bool = typer.Option(
        False, help="Count transactions flagged as internal transfers."
    ),
) -> None:
    _exit(cmd_summary(_opt_str(csv_path), include_internal=include_internal))


@app.command("analyze")
def analyze_cmd(
    csv_path: Annotated[Path | None, STORED_OR_CSV_ARGUMENT] = None,
    *,
    model: str | None = typer.Option(
        None, help="Override EXPENSE_ANALYSIS_MODEL (default gpt-4o-mini)."
    ),
) -> None:
    _exit(cmd_analyze(_opt_str(csv_path), model=model))


@app.command("show")
def show_cmd(
    date_from: str | None = typer.Option(None, "--from", help="First day of the selected range."),
    date_to: str | None = typer.Option(None, "--to", help="Last day of the selected range."),
) -> None:
    _exit(cmd_show(date_from=date_from, date_to=date_to))


@app.command("set-category")
def set_category_cmd(
    tx_id: int = typer.Argument(..., help="Transaction id as printed by `show`."),
    name: str = typer.Argument(..., help="Built-in or user-added category name."),
) -> None:
    _exit(cmd_set_category(tx_id, name))


@app.command("toggle-internal")
def toggle_internal_cmd(
    tx_id: int = typer.Argument(..., help="Transaction id as printed by `show`."),
) -> None:
    _exit(cmd_toggle_internal(tx_id))


@app.command("privacy")
def privacy_cmd(
    state: PrivacyState | None = typer.Argument(None, help="Switch privacy mode on or off."),
) -> None:
    _exit(cmd_privacy(None if state is None else state is PrivacyState.on))


@app.command("clear")
def clear_cmd() -> None:
    _exit(cmd_clear())


@app.command("categories")
def categories_cmd(
    add: str | None = typer.Option(None, help="Add a user-defined category."),
) -> None:
    _exit(cmd_categories(add=add))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, help="Logging level (falls back to EXPENSE_ANALYSIS_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps variables already set in the environment.
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    app()
