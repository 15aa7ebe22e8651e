"""Tests for the mutation API and input validation."""

import json
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from finanzas.models import AuditEventType, Category, TransactionType
from finanzas.mutations import IdGenerator, TransactionMutations
from finanzas.services.storage import InMemoryStorage, NotFoundError, PersistenceError
from finanzas.store import DEFAULT_SLOT_KEY, TransactionStore
from finanzas.validation import TransactionValidator, ValidationError, parse_amount

from conftest import NOW, UTC


class FailingStorage(InMemoryStorage):
    def write(self, key, value):
        raise PersistenceError("disk full")


@pytest.fixture
def mutations(store, clock, audit_logger):
    return TransactionMutations(store, clock=clock, audit_logger=audit_logger)


class TestParseAmount:
    """Tests for amount parsing."""

    def test_accepts_numbers_and_strings(self):
        """Test common numeric inputs."""
        assert parse_amount("25000") == (Decimal("25000"), None)
        assert parse_amount(" 12.50 ")[0] == Decimal("12.50")
        assert parse_amount(7)[0] == Decimal(7)
        assert parse_amount(0.1)[0] == Decimal("0.1")

    def test_issue_types(self):
        """Test each rejection reason."""
        cases = {
            None: "missing",
            "": "missing",
            "abc": "not_numeric",
            True: "not_numeric",
            "NaN": "not_finite",
            float("inf"): "not_finite",
            "0": "not_positive",
            -3: "not_positive",
        }
        for value, issue_type in cases.items():
            amount, issue = parse_amount(value)
            assert amount is None
            assert issue.issue_type == issue_type


class TestValidator:
    """Tests for TransactionValidator."""

    def test_collects_every_issue(self):
        """Test all problems are reported together."""
        with pytest.raises(ValidationError) as exc_info:
            TransactionValidator().validate({
                "id": 1,
                "type": "transfer",
                "amount": "-1",
                "category": "pets",
                "colour": "red",
            })
        kinds = {issue.issue_type for issue in exc_info.value.issues}
        assert kinds == {"unknown_type", "not_positive", "unknown_category", "unknown_field"}

    def test_validation_error_is_value_error(self):
        """Test callers may catch ValueError."""
        with pytest.raises(ValueError):
            TransactionValidator().validate({"id": 1, "type": "income", "amount": 0})

    def test_description_too_long(self):
        """Test model constraints are reported as issues."""
        with pytest.raises(ValidationError) as exc_info:
            TransactionValidator().validate({
                "id": 1,
                "type": "income",
                "amount": 1,
                "description": "x" * 501,
            })
        assert exc_info.value.issues[0].field == "description"

    def test_friendly_summary(self):
        """Test the user-facing summary lists each issue."""
        validator = TransactionValidator()
        with pytest.raises(ValidationError) as exc_info:
            validator.validate({"id": 1, "type": "income", "amount": "abc"})
        summary = validator.get_user_friendly_summary(exc_info.value)
        assert "Amount must be a number" in summary


class TestIdGenerator:
    """Tests for id generation."""

    def test_millisecond_clock(self, clock):
        """Test ids come from the clock in milliseconds."""
        assert IdGenerator(clock).next_id() == int(NOW.timestamp() * 1000)

    def test_rapid_calls_stay_unique(self, clock):
        """Test calls within one millisecond never collide."""
        ids = IdGenerator(clock)
        issued = [ids.next_id() for _ in range(5)]
        assert issued == sorted(set(issued))
        assert len(issued) == 5

    def test_clock_going_backwards(self, clock):
        """Test ids keep increasing when the clock jumps back."""
        ids = IdGenerator(clock)
        first = ids.next_id()
        clock.now = NOW - timedelta(hours=1)
        assert ids.next_id() > first

    def test_respects_floor(self, clock):
        """Test ids exceed ids already in the store."""
        floor = int(NOW.timestamp() * 1000) + 10_000
        assert IdGenerator(clock).next_id(floor=floor) == floor + 1


class TestAdd:
    """Tests for TransactionMutations.add."""

    def test_add_persists(self, mutations, store, storage):
        """Test a new transaction is stored and written."""
        tx = mutations.add(
            type="expense",
            amount="25000",
            description="Mercado",
            category="food",
        )

        assert store.get(tx.id) == tx
        assert tx.type == TransactionType.EXPENSE
        assert tx.category == Category.FOOD
        assert tx.date == NOW
        saved = json.loads(storage.read(DEFAULT_SLOT_KEY))
        assert saved["transactions"][0]["id"] == tx.id

    def test_rapid_adds_get_unique_ids(self, mutations):
        """Test two adds in the same millisecond."""
        first = mutations.add(type="income", amount=1)
        second = mutations.add(type="income", amount=2)
        assert second.id > first.id

    def test_id_above_existing(self, store, clock, make_tx):
        """Test new ids exceed stored ids even with a clock behind them."""
        future_id = int(NOW.timestamp() * 1000) + 5_000
        store.insert(make_tx(future_id))
        tx = TransactionMutations(store, clock=clock).add(type="income", amount=1)
        assert tx.id == future_id + 1

    def test_explicit_date(self, mutations):
        """Test a given date is kept."""
        when = datetime(2024, 1, 2, 9, 30, tzinfo=UTC)
        assert mutations.add(type="expense", amount=5, date=when).date == when

    def test_invalid_input_changes_nothing(self, mutations, store, storage, audit_logger):
        """Test rejected input is neither stored nor written."""
        for bad in ({"amount": "0"}, {"amount": "NaN"}, {"amount": "x"}, {"category": "pets"}):
            kwargs = {"type": "expense", "amount": 10, **bad}
            with pytest.raises(ValidationError):
                mutations.add(**kwargs)
        with pytest.raises(ValidationError):
            mutations.add(type="transfer", amount=10)

        assert len(store) == 0
        assert storage.write_count == 0
        assert audit_logger.recent_events(1)[0].event_type == AuditEventType.VALIDATION_FAILED

    def test_persistence_failure_keeps_transaction(self, clock):
        """Test a failed save raises but the record stays in memory."""
        store = TransactionStore(FailingStorage())
        mutations = TransactionMutations(store, clock=clock)

        with pytest.raises(PersistenceError):
            mutations.add(type="income", amount=100)
        assert len(store) == 1


class TestUpdate:
    """Tests for TransactionMutations.update."""

    def test_merges_fields(self, mutations, store):
        """Test only the given fields change."""
        tx = mutations.add(type="expense", amount=10, description="Bus", category="transport")
        updated = mutations.update(tx.id, amount="12.5")

        assert updated.amount == Decimal("12.5")
        assert updated.description == "Bus"
        assert updated.category == Category.TRANSPORT
        assert updated.date == tx.date
        assert store.get(tx.id) == updated

    def test_none_date_keeps_existing_date(self, mutations, store):
        """Test an explicit date of None does not reset the date to now."""
        when = datetime(2020, 1, 1, tzinfo=UTC)
        tx = mutations.add(type="expense", amount=10, date=when)
        updated = mutations.update(tx.id, date=None, amount=5)

        assert updated.date == when
        assert updated.amount == 5
        assert store.get(tx.id).date == when

    def test_unknown_id(self, mutations):
        """Test updating a missing transaction."""
        with pytest.raises(NotFoundError) as exc_info:
            mutations.update(123, amount=5)
        assert exc_info.value.transaction_id == 123

    def test_unknown_field(self, mutations):
        """Test only editable fields are accepted."""
        tx = mutations.add(type="expense", amount=10)
        with pytest.raises(ValidationError):
            mutations.update(tx.id, id=999)
        with pytest.raises(ValidationError):
            mutations.update(tx.id, colour="red")

    def test_revalidates(self, mutations, store):
        """Test merged values go through the same rules as add."""
        tx = mutations.add(type="expense", amount=10)
        with pytest.raises(ValidationError):
            mutations.update(tx.id, amount=-1)
        assert store.get(tx.id) == tx


class TestRemove:
    """Tests for TransactionMutations.remove."""

    def test_remove_is_idempotent(self, mutations, store):
        """Test removing twice leaves the same state."""
        keep = mutations.add(type="income", amount=1)
        gone = mutations.add(type="expense", amount=2)

        assert mutations.remove(gone.id) is True
        after_first = store.snapshot()
        assert mutations.remove(gone.id) is False
        assert store.snapshot() == after_first == (keep,)

    def test_remove_unknown_is_noop(self, mutations, store):
        """Test removing an id that never existed."""
        assert mutations.remove(42) is False
        assert len(store) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
