"""Lookup failures for transactions, accounts and reference data."""

from .base import DomainException


class NotFoundException(DomainException):
    """Base class for missing entities."""


class TransactionNotFoundException(NotFoundException):
    """Raised when a transaction cannot be found."""

    def __init__(self, transaction_id: str):
        super().__init__(
            message=f"Transaction not found: {transaction_id}",
            code="TRANSACTION_NOT_FOUND",
        )
        self.transaction_id = transaction_id


class AccountNotFoundException(NotFoundException):
    """Raised when a referenced bank account cannot be found."""

    def __init__(self, account_id: str):
        super().__init__(
            message=f"Bank account not found: {account_id}",
            code="ACCOUNT_NOT_FOUND",
        )
        self.account_id = account_id


class ReferenceNotFoundException(NotFoundException):
    """Raised when a referenced company, category or client cannot be found."""

    def __init__(self, kind: str, reference_id: str):
        super().__init__(
            message=f"{kind.capitalize()} not found: {reference_id}",
            code=f"{kind.upper()}_NOT_FOUND",
        )
        self.kind = kind
        self.reference_id = reference_id
