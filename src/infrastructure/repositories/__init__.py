"""Repository implementations."""

from .ledger_repository import PostgresLedgerStore, translate_storage_errors

__all__ = [
    "PostgresLedgerStore",
    "translate_storage_errors",
]
