"""Mutation API package."""

from finanzas.mutations.service import IdGenerator, TransactionMutations

__all__ = ["IdGenerator", "TransactionMutations"]
