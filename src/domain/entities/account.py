"""Bank account entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from .transaction import utcnow


@dataclass
class BankAccount:
    """
    A bank account whose balance is moved only by posting approved transactions.

    ``current_balance`` equals ``initial_balance`` plus the signed sum of every
    approved transaction that references the account.
    """

    name: str
    owner_id: str
    initial_balance: Decimal = Decimal("0.00")
    current_balance: Decimal = Decimal("0.00")
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
