"""Exceptions raised by ``expense_analysis``.

Parse failures: exactly one :class:`StatementParseError` subclass is raised
per failed :func:`expense_analysis.pipeline.parse_statement` call. Row-level
problems (bad dates, zero or unparseable amounts, mapping errors) never
surface here; those rows are dropped silently.

File intake: :class:`FileIntakeError` rejects a file before it is parsed
(missing, too large, not ``.csv``, unreadable or empty).

Store failures: :class:`StoreError` wraps database errors of the local store.
"""

from __future__ import annotations


class StatementParseError(ValueError):
    """Base class for terminal statement parse failures."""


class HeaderNotFoundError(StatementParseError):
    """No line in the file matched the selected format's header keywords."""

    def __init__(self, bank_name: str | None = None) -> None:
        super().__init__(
            "Could not find the header row in the CSV. "
            "Please make sure the file is a valid bank export."
        )
        self.bank_name = bank_name


class CriticalDelimitedParseError(StatementParseError):
    """The CSV reader hit a structural error before producing any record."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"CSV parsing error: {detail}")
        self.detail = detail


class NoValidTransactionsError(StatementParseError):
    """Every parsed record was dropped during mapping/validation."""

    def __init__(self, bank_name: str | None = None) -> None:
        super().__init__(
            "No valid transactions found. Please check if the CSV format is supported."
        )
        self.bank_name = bank_name


class FileIntakeError(ValueError):
    """A statement file was rejected before parsing."""


class StoreError(RuntimeError):
    """The local store could not be read or written."""


__all__ = [
    "StatementParseError",
    "HeaderNotFoundError",
    "CriticalDelimitedParseError",
    "NoValidTransactionsError",
    "FileIntakeError",
    "StoreError",
]
