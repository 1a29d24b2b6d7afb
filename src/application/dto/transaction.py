"""Data transfer objects for transaction lifecycle operations."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from src.domain.entities import BankAccount, Currency, Transaction, TransactionType
from src.service.ledger import TransactionDraft, quantize_money


@dataclass(frozen=True)
class CreateTransactionRequest:
    """Input data for submitting a transaction."""

    type: TransactionType
    amount: Decimal
    company_id: Optional[UUID]
    currency: Currency = Currency.INR
    conversion_rate: Optional[Decimal] = None
    from_account_id: Optional[UUID] = None
    to_account_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    description: Optional[str] = None

    def to_draft(self) -> TransactionDraft:
        return TransactionDraft(
            type=self.type,
            amount=self.amount,
            currency=self.currency,
            company_id=self.company_id,
            conversion_rate=self.conversion_rate,
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
            category_id=self.category_id,
            client_id=self.client_id,
            description=self.description,
        )


@dataclass(frozen=True)
class UpdateTransactionRequest:
    """Partial update: only the keys present in ``changes`` are applied."""

    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionResponse:
    """Response data for a single transaction."""

    transaction_id: str
    type: str
    status: str
    amount: str
    currency: str
    conversion_rate: Optional[str]
    converted_base_amount: str
    company_id: str
    category_id: Optional[str]
    client_id: Optional[str]
    from_account_id: Optional[str]
    to_account_id: Optional[str]
    owner_id: str
    description: Optional[str]
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionResponse":
        def opt(value) -> Optional[str]:
            return str(value) if value is not None else None

        return cls(
            transaction_id=str(transaction.id),
            type=transaction.type.value,
            status=transaction.status.value,
            amount=str(quantize_money(transaction.amount)),
            currency=transaction.currency.value,
            conversion_rate=opt(transaction.conversion_rate),
            converted_base_amount=str(quantize_money(transaction.converted_base_amount)),
            company_id=str(transaction.company_id),
            category_id=opt(transaction.category_id),
            client_id=opt(transaction.client_id),
            from_account_id=opt(transaction.from_account_id),
            to_account_id=opt(transaction.to_account_id),
            owner_id=transaction.owner_id,
            description=transaction.description,
            created_at=transaction.created_at.isoformat(),
            updated_at=transaction.updated_at.isoformat(),
        )


@dataclass(frozen=True)
class AccountResponse:
    """Bank account with its posted balance."""

    account_id: str
    name: str
    owner_id: str
    initial_balance: str
    current_balance: str

    @classmethod
    def from_entity(cls, account: BankAccount) -> "AccountResponse":
        return cls(
            account_id=str(account.id),
            name=account.name,
            owner_id=account.owner_id,
            initial_balance=str(quantize_money(account.initial_balance)),
            current_balance=str(quantize_money(account.current_balance)),
        )
