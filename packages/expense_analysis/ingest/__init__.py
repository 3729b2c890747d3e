"""Bank format detection, header discovery and row mapping."""

from .base import HEADER_NOT_FOUND, BankFormat, RawRow
from .registry import BANK_FORMATS, get_format, select_format

__all__ = [
    "BANK_FORMATS",
    "BankFormat",
    "HEADER_NOT_FOUND",
    "RawRow",
    "get_format",
    "select_format",
]
