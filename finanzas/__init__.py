"""
Finanzas - Source Package

A local, single-user personal finance tracker: record income and
expenses, inspect balances and category breakdowns over time windows,
and get simple spending suggestions.

DESIGN PRINCIPLES:
1. One authoritative query and aggregation implementation
2. Every mutation is validated, applied and persisted before returning
3. Corrupt local data never blocks the user
4. Imports are all-or-nothing
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finanzas Team"
