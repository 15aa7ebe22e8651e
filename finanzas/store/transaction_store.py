"""
Transaction Store

DESIGN DECISION: The store is the ONLY owner of the transaction list.
Query and reporting code receives immutable snapshots; the mutation
service changes the list through the methods below and then calls
``save()``.

Lifecycle:
1. ``load()`` once at startup - never raises, corrupt data means empty
2. Mutations edit the list in place, each followed by ``save()``
3. ``replace()`` swaps the whole list at once (backup restore)
"""

import json
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from finanzas.audit import AuditLogger
from finanzas.models.transaction import Transaction, TransactionDocument
from finanzas.services.storage import (
    ImportFormatError,
    KeyValueStorageInterface,
    PersistenceError,
)


DEFAULT_SLOT_KEY = "finance_app_data_v1"


def decode_json(text: str) -> Any:
    """Parse stored or imported JSON, reading fractional numbers as Decimal."""
    return json.loads(text, parse_float=Decimal)


def _describe_errors(error: PydanticValidationError, limit: int = 3) -> str:
    parts = []
    for err in error.errors()[:limit]:
        location = ".".join(str(p) for p in err["loc"])
        parts.append(f"{location}: {err['msg']}")
    more = error.error_count() - limit
    if more > 0:
        parts.append(f"... and {more} more")
    return "; ".join(parts)


def parse_document(value: Any) -> TransactionDocument:
    """
    Validate an incoming document strictly.

    Accepts a ``TransactionDocument`` or a mapping with a
    ``transactions`` list. Any malformed record rejects the whole
    document.

    Raises:
        ImportFormatError: With a description of what is wrong
    """
    if isinstance(value, TransactionDocument):
        document = value
    else:
        if not isinstance(value, Mapping):
            raise ImportFormatError(
                "Invalid file format: expected an object with a 'transactions' list"
            )
        if "transactions" not in value:
            raise ImportFormatError("Invalid file format: missing 'transactions' field")
        if not isinstance(value["transactions"], list):
            raise ImportFormatError("Invalid file format: 'transactions' must be a list")
        try:
            document = TransactionDocument.model_validate(
                {"transactions": value["transactions"]}
            )
        except PydanticValidationError as e:
            raise ImportFormatError(
                f"Invalid transaction records: {_describe_errors(e)}"
            ) from e

    seen: set[int] = set()
    for transaction in document.transactions:
        if transaction.id in seen:
            raise ImportFormatError(f"Duplicate transaction id: {transaction.id}")
        seen.add(transaction.id)

    return document


class TransactionStore:
    """
    Owns the canonical, insertion-ordered list of transactions and its
    load/save lifecycle against one key-value slot.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_SLOT_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key
        self._audit_logger = audit_logger
        self._transactions: list[Transaction] = []

    @property
    def key(self) -> str:
        return self._key

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def load(self) -> list[Transaction]:
        """
        Load the persisted document.

        Absent, unreadable or malformed data yields an empty store.
        Malformed individual records are skipped. Never raises.
        """
        try:
            raw = self._storage.read(self._key)
        except PersistenceError as e:
            return self._load_failed(str(e))

        if raw is None:
            self._transactions = []
            if self._audit_logger:
                self._audit_logger.log_store_loaded(0)
            return []

        try:
            data = decode_json(raw)
        except (json.JSONDecodeError, TypeError) as e:
            return self._load_failed(f"Invalid JSON: {e}")

        records = data.get("transactions") if isinstance(data, dict) else None
        if not isinstance(records, list):
            return self._load_failed("Document has no 'transactions' list")

        loaded: list[Transaction] = []
        seen: set[int] = set()
        skipped = 0
        for index, record in enumerate(records):
            try:
                transaction = Transaction.model_validate(record)
            except PydanticValidationError as e:
                skipped += 1
                if self._audit_logger:
                    self._audit_logger.log_record_skipped(index, _describe_errors(e))
                continue
            if transaction.id in seen:
                skipped += 1
                if self._audit_logger:
                    self._audit_logger.log_record_skipped(
                        index, f"Duplicate transaction id: {transaction.id}"
                    )
                continue
            seen.add(transaction.id)
            loaded.append(transaction)

        self._transactions = loaded
        if self._audit_logger:
            self._audit_logger.log_store_loaded(len(loaded), skipped)
        return list(loaded)

    def save(self) -> None:
        """
        Write the full collection to storage.

        Raises:
            PersistenceError: The write failed. In-memory state is kept.
        """
        text = json.dumps(self.to_document().to_storage_dict(), ensure_ascii=False)
        try:
            self._storage.write(self._key, text)
        except PersistenceError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(str(e))
            raise

    def replace(self, document: Any) -> TransactionDocument:
        """
        Replace the whole collection and persist it.

        The document is fully validated before anything changes, and
        the swap is a single assignment, so readers see either the old
        or the new collection.

        Raises:
            ImportFormatError: Malformed document, state untouched
            PersistenceError: Swapped in memory but not persisted
        """
        parsed = parse_document(document)
        self._transactions = list(parsed.transactions)
        self.save()
        return parsed

    def _load_failed(self, reason: str) -> list[Transaction]:
        self._transactions = []
        if self._audit_logger:
            self._audit_logger.log_store_load_failed(reason)
        return []

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def snapshot(self) -> tuple[Transaction, ...]:
        """Immutable view of the current collection, in insertion order."""
        return tuple(self._transactions)

    def to_document(self) -> TransactionDocument:
        return TransactionDocument(transactions=list(self._transactions))

    def get(self, transaction_id: int) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def max_id(self) -> int:
        """Largest id in the store, 0 when empty."""
        return max((t.id for t in self._transactions), default=0)

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return any(t.id == transaction_id for t in self._transactions)

    # -------------------------------------------------------------------------
    # In-place edits (callers persist with save())
    # -------------------------------------------------------------------------

    def insert(self, transaction: Transaction) -> None:
        """Append a transaction whose id is not in the store yet."""
        if transaction.id in self:
            raise ValueError(f"Duplicate transaction id: {transaction.id}")
        self._transactions.append(transaction)

    def put(self, transaction: Transaction) -> None:
        """Replace the transaction with the same id, keeping its position."""
        for index, existing in enumerate(self._transactions):
            if existing.id == transaction.id:
                self._transactions[index] = transaction
                return
        raise KeyError(transaction.id)

    def discard(self, transaction_id: int) -> bool:
        """Remove a transaction if present. Returns whether it existed."""
        remaining = [t for t in self._transactions if t.id != transaction_id]
        removed = len(remaining) != len(self._transactions)
        self._transactions = remaining
        return removed
