"""
Domain Interfaces (Ports)
"""

from .repositories import LedgerStore, TransactionFilters

__all__ = [
    "LedgerStore",
    "TransactionFilters",
]
