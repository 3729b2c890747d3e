"""Local persistence of parsed statements, user categories and privacy mode.

Payload format
--------------
Parsed data is stored as one JSON document under ``expense-analyzer-data``::

    {
      "bankName": "ČSOB",
      "dateRange": {"from": "2025-01-02T00:00:00.000Z", "to": "..."},
      "transactions": [{"id": 0, "date": "2025-01-31T00:00:00.000Z",
                        "amount": -120.5, "variableSymbol": "", ...}],
      "selectedRange": {"from": "...", "to": "..."} | null
    }

Dates are written as ISO-8601 timestamps at midnight UTC. On load only the
calendar date of a timestamp is kept, so time-of-day never survives a round
trip. Payloads are validated with pydantic; anything malformed loads as
"nothing stored" rather than raising.

Storage is a key/value table accessed through SQLAlchemy (see
:mod:`expense_analysis.db`).
"""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from .db import KvEntry, resolve_database_url, session_scope
from .errors import StoreError
from .logging_setup import get_logger
from .models import (
    DEFAULT_CURRENCY,
    UNCATEGORIZED,
    DateRange,
    ParsedData,
    StoredRestore,
    Transaction,
)

STORAGE_KEY = "expense-analyzer-data"
STORAGE_KEY_CUSTOM_CATEGORIES = "expense-analyzer-custom-categories"
STORAGE_KEY_PRIVACY = "expense-analyzer-privacy-mode"

_DEFAULT_BANK_NAME = "Saved data"

_logger = get_logger("expense_analysis.storage")


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------


def to_timestamp(day: dt.date) -> str:
    """``2025-01-31`` → ``"2025-01-31T00:00:00.000Z"``."""

    return f"{day.isoformat()}T00:00:00.000Z"


def from_timestamp(value: Any) -> dt.date:
    """Calendar date of an ISO-8601 date or timestamp string; time is dropped."""

    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO-8601 string, got {type(value).__name__}")
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return dt.datetime.fromisoformat(s).date()


# ---------------------------------------------------------------------------
# Payload schema (DTOs)
# ---------------------------------------------------------------------------


class StoredRange(BaseModel):
    model_config = ConfigDict(extra="ignore")

    start: dt.date = Field(alias="from")
    end: dt.date = Field(alias="to")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> dt.date:
        return from_timestamp(v)


class StoredTransaction(BaseModel):
    """One serialized transaction; camelCase keys as written to the store."""

    model_config = ConfigDict(extra="ignore")

    id: int
    date: dt.date
    amount: float
    currency: str = DEFAULT_CURRENCY
    counterparty: str = ""
    description: str = ""
    category: str = UNCATEGORIZED
    variable_symbol: str = Field(default="", alias="variableSymbol")
    note: str = ""
    operation_type: str = Field(default="", alias="operationType")
    internal: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> dt.date:
        return from_timestamp(v)

    @field_validator("internal", mode="before")
    @classmethod
    def _truthy(cls, v: Any) -> bool:
        return bool(v)

    @field_validator(
        "counterparty",
        "description",
        "variable_symbol",
        "note",
        "operation_type",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, v: Any) -> Any:
        return v or DEFAULT_CURRENCY

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, v: Any) -> Any:
        return v or UNCATEGORIZED


class StoredPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bank_name: str | None = Field(default=None, alias="bankName")
    date_range: StoredRange = Field(alias="dateRange")
    transactions: list[StoredTransaction]
    selected_range: StoredRange | None = Field(default=None, alias="selectedRange")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _range_to_json(r: DateRange) -> dict[str, str]:
    return {"from": to_timestamp(r.start), "to": to_timestamp(r.end)}


def _transaction_to_json(t: Transaction) -> dict[str, Any]:
    return {
        "id": t.id,
        "date": to_timestamp(t.date),
        "amount": t.amount,
        "currency": t.currency,
        "counterparty": t.counterparty,
        "description": t.description,
        "category": t.category,
        "variableSymbol": t.variable_symbol,
        "note": t.note,
        "operationType": t.operation_type,
        "internal": t.internal,
    }


def serialize_parsed_data(data: ParsedData, selected_range: DateRange | None = None) -> str:
    """Encode ``data`` (and the range the user is viewing) as a JSON document."""

    payload = {
        "bankName": data.bank_name,
        "dateRange": _range_to_json(data.date_range),
        "transactions": [_transaction_to_json(t) for t in data.transactions],
        "selectedRange": _range_to_json(selected_range) if selected_range else None,
    }
    return json.dumps(payload, ensure_ascii=False)


def _to_range(r: StoredRange) -> DateRange:
    return DateRange(start=r.start, end=r.end)


def deserialize_parsed_data(raw: str | None) -> StoredRestore | None:
    """Decode a document written by :func:`serialize_parsed_data`.

    Returns ``None`` for missing, malformed or empty payloads.
    """

    if not raw:
        return None
    try:
        payload = StoredPayload.model_validate_json(raw)
    except ValidationError as e:
        _logger.warning("ignoring stored data that failed validation: %s", e.error_count())
        return None
    if not payload.transactions:
        return None

    try:
        date_range = _to_range(payload.date_range)
        selected = _to_range(payload.selected_range) if payload.selected_range else date_range
    except ValueError as e:
        _logger.warning("ignoring stored data with an invalid range: %s", e)
        return None

    transactions = [
        Transaction(
            id=st.id,
            date=st.date,
            amount=st.amount,
            currency=st.currency,
            counterparty=st.counterparty,
            description=st.description,
            category=st.category,
            variable_symbol=st.variable_symbol,
            note=st.note,
            operation_type=st.operation_type,
            internal=st.internal,
        )
        for st in payload.transactions
    ]
    data = ParsedData(
        bank_name=payload.bank_name or _DEFAULT_BANK_NAME,
        transactions=transactions,
        date_range=date_range,
    )
    return StoredRestore(data=data, selected_range=selected)


# ---------------------------------------------------------------------------
# Keyed store
# ---------------------------------------------------------------------------


class LocalStore:
    """Key/value persistence for one user's working state.

    Parameters
    ----------
    database_url:
        SQLAlchemy URL. Defaults to ``EXPENSE_ANALYSIS_DB_URL`` or a SQLite
        file in the current directory.
    """

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = resolve_database_url(database_url)

    # ---- raw access ---------------------------------------------------------

    def get(self, key: str) -> str | None:
        try:
            with session_scope(database_url=self.database_url) as s:
                row = s.get(KvEntry, key)
                return row.value if row is not None else None
        except SQLAlchemyError as e:
            raise StoreError(f"failed to read {key!r} from the local store: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with session_scope(database_url=self.database_url) as s:
                s.merge(KvEntry(key=key, value=value, updated_at=dt.datetime.now(dt.UTC)))
        except SQLAlchemyError as e:
            raise StoreError(f"failed to write {key!r} to the local store: {e}") from e

    def delete(self, key: str) -> None:
        try:
            with session_scope(database_url=self.database_url) as s:
                s.execute(delete(KvEntry).where(KvEntry.key == key))
        except SQLAlchemyError as e:
            raise StoreError(f"failed to delete {key!r} from the local store: {e}") from e

    # ---- parsed data --------------------------------------------------------

    def save(self, data: ParsedData | None, selected_range: DateRange | None = None) -> None:
        """Store ``data``; ``None`` clears whatever was stored."""

        if data is None:
            self.clear()
            return
        self.set(STORAGE_KEY, serialize_parsed_data(data, selected_range))

    def load(self) -> StoredRestore | None:
        return deserialize_parsed_data(self.get(STORAGE_KEY))

    def clear(self) -> None:
        self.delete(STORAGE_KEY)

    def set_selected_range(self, selected_range: DateRange) -> None:
        restored = self._require_data()
        self.save(restored.data, selected_range)

    # ---- per-transaction edits ----------------------------------------------

    def _require_data(self) -> StoredRestore:
        restored = self.load()
        if restored is None:
            raise LookupError("no statement is stored; run `parse --save` first")
        return restored

    def _edit(self, tx_id: int, field: str, value: Any) -> Transaction:
        """Set ``field`` on transaction ``tx_id`` and write the data back.

        The selected range is kept. Raises ``LookupError`` when nothing is
        stored or no transaction has that id.
        """

        restored = self._require_data()
        for t in restored.data.transactions:
            if t.id == tx_id:
                setattr(t, field, value)
                self.save(restored.data, restored.selected_range)
                _logger.info("transaction %d: %s set to %r", tx_id, field, value)
                return t
        raise LookupError(f"no transaction with id {tx_id}")

    def set_category(self, tx_id: int, category: str) -> Transaction:
        return self._edit(tx_id, "category", category)

    def toggle_internal(self, tx_id: int) -> Transaction:
        """Flip the internal-transfer flag of transaction ``tx_id``."""

        restored = self._require_data()
        current = next((t for t in restored.data.transactions if t.id == tx_id), None)
        if current is None:
            raise LookupError(f"no transaction with id {tx_id}")
        return self._edit(tx_id, "internal", not current.internal)

    # ---- user-added categories ---------------------------------------------

    def load_custom_categories(self) -> list[str]:
        raw = self.get(STORAGE_KEY_CUSTOM_CATEGORIES)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("ignoring malformed custom category list")
            return []
        if not isinstance(parsed, list):
            return []
        return [c for c in parsed if isinstance(c, str) and c.strip()]

    def save_custom_categories(self, categories: Iterable[str]) -> None:
        self.set(STORAGE_KEY_CUSTOM_CATEGORIES, json.dumps(list(categories), ensure_ascii=False))

    # ---- privacy mode -------------------------------------------------------

    def load_privacy_mode(self) -> bool:
        return self.get(STORAGE_KEY_PRIVACY) == "true"

    def save_privacy_mode(self, enabled: bool) -> None:
        self.set(STORAGE_KEY_PRIVACY, "true" if enabled else "false")


__all__ = [
    "LocalStore",
    "STORAGE_KEY",
    "STORAGE_KEY_CUSTOM_CATEGORIES",
    "STORAGE_KEY_PRIVACY",
    "StoredPayload",
    "StoredTransaction",
    "deserialize_parsed_data",
    "from_timestamp",
    "serialize_parsed_data",
    "to_timestamp",
]
