"""Domain Entities - Core business objects."""

from .transaction import (
    Transaction,
    TransactionType,
    TransactionStatus,
    Currency,
    ALLOWED_TRANSITIONS,
    utcnow,
)
from .account import BankAccount
from .reference import Reference, ReferenceKind
from .actor import Actor, Role

__all__ = [
    "Transaction",
    "TransactionType",
    "TransactionStatus",
    "Currency",
    "ALLOWED_TRANSITIONS",
    "utcnow",
    "BankAccount",
    "Reference",
    "ReferenceKind",
    "Actor",
    "Role",
]
