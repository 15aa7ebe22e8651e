"""Transaction store package."""

from finanzas.store.transaction_store import (
    DEFAULT_SLOT_KEY,
    TransactionStore,
    decode_json,
    parse_document,
)

__all__ = ["DEFAULT_SLOT_KEY", "TransactionStore", "decode_json", "parse_document"]
