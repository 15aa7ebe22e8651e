"""
Mutation API

Every mutation follows the same three steps before returning:
validate -> apply to the store -> persist.

If persisting fails the PersistenceError reaches the caller, but the
change stays applied in memory so the current session keeps working.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from finanzas.audit import AuditLogger
from finanzas.models.transaction import Category, Transaction, TransactionType
from finanzas.services.storage import NotFoundError
from finanzas.store import TransactionStore
from finanzas.validation import (
    EDITABLE_FIELDS,
    TransactionValidator,
    ValidationError,
    ValidationIssue,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdGenerator:
    """
    Millisecond-timestamp ids that never repeat.

    Rapid successive calls within the same millisecond, a clock that
    goes backwards or ids already in the store all fall back to
    ``last + 1``.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._last = 0

    def next_id(self, floor: int = 0) -> int:
        """Fresh id strictly greater than ``floor`` and every id issued before."""
        candidate = int(self._clock().timestamp() * 1000)
        new_id = max(candidate, self._last + 1, floor + 1)
        self._last = new_id
        return new_id


class TransactionMutations:
    """
    Add, update and remove transactions.

    The only component that changes the store's contents one record
    at a time.
    """

    def __init__(
        self,
        store: TransactionStore,
        validator: Optional[TransactionValidator] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Callable[[], datetime] = _utcnow,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()
        self._clock = clock
        self._ids = id_generator or IdGenerator(clock)
        self._audit_logger = audit_logger

    def add(
        self,
        type: Union[TransactionType, str],
        amount: Any,
        description: str = "",
        category: Union[Category, str] = Category.OTHER,
        date: Optional[datetime] = None,
    ) -> Transaction:
        """
        Create, store and persist a new transaction.

        Raises:
            ValidationError: Bad amount, type or category
            PersistenceError: Stored in memory but not persisted
        """
        fields = {
            "type": type,
            "amount": amount,
            "description": description,
            "category": category,
            "date": date or self._clock(),
        }
        # Validate before spending an id
        self._validate({"id": 0, **fields})

        transaction = self._validate({
            "id": self._ids.next_id(floor=self._store.max_id()),
            **fields,
        })
        self._store.insert(transaction)

        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            )

        self._store.save()
        return transaction

    def update(self, transaction_id: int, **fields: Any) -> Transaction:
        """
        Merge ``fields`` into an existing transaction and persist.

        Only the given fields change; the merged record is validated
        under the same rules as ``add``.
        A ``date`` of None keeps the existing date.

        Raises:
            NotFoundError: Unknown id
            ValidationError: Unknown field or invalid merged record
            PersistenceError: Updated in memory but not persisted
        """
        existing = self._store.get(transaction_id)
        if existing is None:
            raise NotFoundError(transaction_id)

        unknown = [name for name in fields if name not in EDITABLE_FIELDS]
        if unknown:
            issues = [
                ValidationIssue(
                    field=name,
                    issue_type="unknown_field",
                    message=f"Field cannot be edited: {name}",
                )
                for name in unknown
            ]
            self._report_invalid(ValidationError(issues))

        if "date" in fields and fields["date"] is None:
            fields = {name: value for name, value in fields.items() if name != "date"}

        merged = {
            "id": existing.id,
            "type": existing.type,
            "amount": existing.amount,
            "description": existing.description,
            "category": existing.category,
            "date": existing.date,
            **fields,
        }
        updated = self._validate(merged)
        self._store.put(updated)

        if self._audit_logger:
            self._audit_logger.log_transaction_updated(updated.id, sorted(fields))

        self._store.save()
        return updated

    def remove(self, transaction_id: int) -> bool:
        """
        Delete a transaction and persist.

        Removing an unknown id is a no-op, not an error. Returns
        whether something was removed.
        """
        existed = self._store.discard(transaction_id)

        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(transaction_id, existed)

        self._store.save()
        return existed

    def _validate(self, fields: dict) -> Transaction:
        try:
            return self._validator.validate(fields)
        except ValidationError as e:
            self._report_invalid(e)

    def _report_invalid(self, error: ValidationError):
        if self._audit_logger:
            self._audit_logger.log_validation_failed(error.as_dicts())
        raise error
