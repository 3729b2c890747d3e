"""Statement CSV → :class:`ParsedData` normalization pipeline.

Stages, in order (linear, no retries):

1. Strip a leading BOM and split into trimmed lines.
2. Pick a bank format from the first lines (the generic format always matches).
3. Locate the header row with that format; none → :class:`HeaderNotFoundError`.
4. Read records from the header on with the stdlib :mod:`csv` module in
   strict quoting mode. Field count mismatches are benign. A ``csv.Error``
   stops reading; when it happens before any record was read →
   :class:`CriticalDelimitedParseError`.
5. Map records in source order, keeping those with a date and a non-zero
   amount. Mapping exceptions drop the record.
6. No survivors → :class:`NoValidTransactionsError`.
7. Stable sort, newest first; reassign ids ``0..N-1``; derive the date range.

The pipeline is all-or-nothing per file and holds no state between calls.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from dataclasses import dataclass, field
from io import StringIO
from os import PathLike

from .errors import CriticalDelimitedParseError, HeaderNotFoundError, NoValidTransactionsError
from .ingest.base import HEADER_NOT_FOUND, BankFormat, RawRow
from .ingest.registry import select_format
from .intake import read_statement_text
from .logging_setup import get_logger
from .models import DateRange, ParsedData, Transaction

_BOM = "\ufeff"

_logger = get_logger("expense_analysis.pipeline")


@dataclass(slots=True)
class DelimitedParseResult:
    """Records read from the CSV body plus any structural errors hit."""

    records: list[dict[str, str | None]] = field(default_factory=list)
    # Structural reader errors (``csv.Error`` messages). Field count
    # mismatches are not errors; they are counted separately.
    errors: list[str] = field(default_factory=list)
    field_mismatches: int = 0


def split_lines(content: str) -> list[str]:
    """Strip a leading BOM, split on ``\\n`` and trim every line."""

    if content.startswith(_BOM):
        content = content[len(_BOM) :]
    return [line.strip() for line in content.split("\n")]


def read_delimited(text: str, delimiter: str) -> DelimitedParseResult:
    """Read ``text`` (header line first) into header → value records.

    - Header names are trimmed.
    - Blank lines are skipped.
    - Extra values beyond the header are discarded; missing values are
      ``None``. Both count as field mismatches, not errors.
    - Quoting errors (an unterminated quoted field, text after a closing
      quote) raise ``csv.Error`` in strict mode. A ``csv.Error`` ends
      reading; records read before it are kept.
    """

    result = DelimitedParseResult()
    with StringIO(text) as f:
        reader = csv.DictReader(f, delimiter=delimiter, strict=True)
        try:
            if reader.fieldnames is None:
                return result
            header = [h.strip() for h in reader.fieldnames]
            reader.fieldnames = header
            for row in reader:
                # DictReader files surplus values under the ``None`` key and
                # pads short rows with ``None`` values.
                extra = row.pop(None, None)  # type: ignore[call-overload]
                if extra is not None or any(v is None for v in row.values()):
                    result.field_mismatches += 1
                result.records.append(row)
        except csv.Error as e:
            result.errors.append(f"{e} (line {reader.line_num})")
    return result


def _map_records(fmt: BankFormat, records: Sequence[RawRow]) -> list[Transaction]:
    kept: list[Transaction] = []
    for idx, record in enumerate(records):
        try:
            mapped = fmt.map_row(record)
        except Exception as e:  # noqa: BLE001 - a bad row must never fail the file
            _logger.debug("dropping record %d: mapping failed: %s", idx, e)
            continue
        if mapped.date is None:
            _logger.debug("dropping record %d: no parseable date", idx)
            continue
        if mapped.amount == 0:
            # Zero and unparseable amounts are indistinguishable here.
            _logger.debug("dropping record %d: zero or unparseable amount", idx)
            continue
        kept.append(Transaction.from_mapped(idx, mapped))
    return kept


def parse_statement(content: str) -> ParsedData:
    """Parse one bank statement CSV export into normalized transactions.

    Parameters
    ----------
    content:
        Full file text (UTF-8, optionally BOM-prefixed). File intake checks
        (size, type, emptiness) live in :mod:`expense_analysis.intake`.

    Returns
    -------
    ParsedData
        Detected bank name, transactions sorted newest first with ids
        ``0..N-1``, and the date range spanning them.

    Raises
    ------
    HeaderNotFoundError
        The selected format found no header row.
    CriticalDelimitedParseError
        The CSV reader failed structurally before producing any record.
    NoValidTransactionsError
        Every record was dropped during mapping/validation.
    """

    lines = split_lines(content)
    fmt = select_format(lines)
    _logger.info("detected statement format: %s", fmt.name)

    header_idx = fmt.header_row(lines)
    if header_idx == HEADER_NOT_FOUND:
        raise HeaderNotFoundError(fmt.name)

    parsed = read_delimited("\n".join(lines[header_idx:]), fmt.delimiter)
    if parsed.field_mismatches:
        _logger.debug("%d record(s) with a field count mismatch", parsed.field_mismatches)
    if parsed.errors:
        _logger.warning(
            "CSV reader error after %d record(s): %s", len(parsed.records), parsed.errors[0]
        )
        if not parsed.records:
            raise CriticalDelimitedParseError(parsed.errors[0])

    transactions = _map_records(fmt, parsed.records)
    if not transactions:
        raise NoValidTransactionsError(fmt.name)

    # ``reverse=True`` keeps source order among equal dates.
    transactions.sort(key=lambda t: t.date, reverse=True)
    for i, t in enumerate(transactions):
        t.id = i

    _logger.info(
        "parsed %d of %d record(s) from %s", len(transactions), len(parsed.records), fmt.name
    )
    return ParsedData(
        bank_name=fmt.name,
        transactions=transactions,
        date_range=DateRange(start=transactions[-1].date, end=transactions[0].date),
    )


def parse_statement_file(path: str | PathLike[str]) -> ParsedData:
    """Run the file intake checks on ``path``, then parse its text.

    Raises :class:`~expense_analysis.errors.FileIntakeError` for rejected files
    and the usual :class:`StatementParseError` subclasses otherwise.
    """

    return parse_statement(read_statement_text(path))


__all__ = [
    "DelimitedParseResult",
    "parse_statement",
    "parse_statement_file",
    "read_delimited",
    "split_lines",
]
