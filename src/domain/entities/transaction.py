"""Transaction entity and its status state machine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionType(str, Enum):
    """Kind of money movement a transaction records."""

    INCOME = "income"  # Money into from_account
    EXPENSE = "expense"  # Money out of from_account
    TRANSFER = "transfer"  # from_account -> to_account


class TransactionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Currency(str, Enum):
    INR = "INR"
    USD = "USD"


# Only pending may move, and only once.
ALLOWED_TRANSITIONS = {
    TransactionStatus.PENDING: frozenset(
        {TransactionStatus.APPROVED, TransactionStatus.REJECTED}
    ),
    TransactionStatus.APPROVED: frozenset(),
    TransactionStatus.REJECTED: frozenset(),
}


@dataclass
class Transaction:
    """
    A submitted income, expense or transfer.

    ``converted_base_amount`` is always expressed in the base currency and is
    derived from ``amount``, ``currency`` and ``conversion_rate``; it is the
    figure that gets posted to account balances and aggregated in reports.

    Attributes:
        type: income, expense or transfer
        amount: Amount as entered, in ``currency``
        currency: Currency the amount was entered in
        conversion_rate: Base units per one foreign unit (foreign only)
        converted_base_amount: Amount in base currency
        company_id: Company the transaction is booked against
        owner_id: Submitting user
        from_account_id: Source account (credited for income)
        to_account_id: Destination account (transfers only)
    """

    type: TransactionType
    amount: Decimal
    currency: Currency
    converted_base_amount: Decimal
    company_id: UUID
    owner_id: str
    conversion_rate: Optional[Decimal] = None
    from_account_id: Optional[UUID] = None
    to_account_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    description: Optional[str] = None
    status: TransactionStatus = TransactionStatus.PENDING
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status is TransactionStatus.PENDING

    def can_transition_to(self, status: TransactionStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]
