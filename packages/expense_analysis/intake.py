"""File intake checks run before a statement is parsed.

A file is accepted when it exists, is at most :data:`MAX_FILE_SIZE` bytes,
has a ``.csv`` extension and holds some text once decoded as UTF-8 (a leading
BOM is tolerated). Each rejection raises :class:`FileIntakeError` with a
message meant for the user.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .errors import FileIntakeError
from .logging_setup import get_logger

MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_EXTENSIONS = (".csv",)

_logger = get_logger("expense_analysis.intake")


def validate_file(path: Path) -> None:
    """Raise :class:`FileIntakeError` when ``path`` cannot be accepted.

    Checks run in order: existence, size, extension.
    """

    if not path.is_file():
        raise FileIntakeError(f"file not found: {path}")
    size = path.stat().st_size
    if size > MAX_FILE_SIZE:
        raise FileIntakeError("File is too large. Maximum size is 10 MB.")
    if path.suffix.lower() not in ALLOWED_EXTENSIONS:
        raise FileIntakeError("Invalid file type. Please upload a CSV file.")


def read_statement_text(path: str | PathLike[str]) -> str:
    """Validate ``path`` and return its text, BOM stripped."""

    p = Path(path)
    validate_file(p)
    try:
        with p.open(encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileIntakeError(f"Failed to read the file: {e}") from e
    if not text.strip():
        raise FileIntakeError("The file is empty.")
    _logger.debug("read %d character(s) from %s", len(text), p)
    return text


__all__ = [
    "ALLOWED_EXTENSIONS",
    "MAX_FILE_SIZE",
    "read_statement_text",
    "validate_file",
]
