"""Public interface for the ``expense_analysis`` package.

This module exposes the statement pipeline, its models and errors, and the
category helpers as the stable import surface. There is no runtime logic
here, only symbol re-exports.
"""

from .categories import (
    CATEGORY_CONFIG,
    get_all_categories,
    get_category_color,
    get_category_icon,
    infer_category,
    merge_taxonomy,
)
from .errors import (
    CriticalDelimitedParseError,
    FileIntakeError,
    HeaderNotFoundError,
    NoValidTransactionsError,
    StatementParseError,
    StoreError,
)
from .locale_parsers import parse_amount, parse_date
from .models import DateRange, MappedRow, ParsedData, StoredRestore, Transaction
from .pipeline import parse_statement, parse_statement_file

__all__ = [
    # Pipeline
    "parse_statement",
    "parse_statement_file",
    "parse_amount",
    "parse_date",
    # Models
    "Transaction",
    "MappedRow",
    "DateRange",
    "ParsedData",
    "StoredRestore",
    # Errors
    "FileIntakeError",
    "StatementParseError",
    "HeaderNotFoundError",
    "CriticalDelimitedParseError",
    "NoValidTransactionsError",
    "StoreError",
    # Categories
    "CATEGORY_CONFIG",
    "get_all_categories",
    "get_category_color",
    "get_category_icon",
    "infer_category",
    "merge_taxonomy",
]
