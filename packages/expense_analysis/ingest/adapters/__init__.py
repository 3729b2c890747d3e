"""Per-bank CSV adapters. Each module exposes one :class:`BankFormat` value."""

from .csob_csv import CSOB
from .fio_csv import FIO
from .generic_csv import GENERIC
from .kb_csv import KB
from .moneta_csv import MONETA

__all__ = ["CSOB", "FIO", "GENERIC", "KB", "MONETA"]
