"""Repository interfaces for ledger persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncContextManager, Dict, List, Optional
from uuid import UUID

from src.domain.entities import (
    BankAccount,
    Reference,
    Transaction,
    TransactionStatus,
)


@dataclass(frozen=True)
class TransactionFilters:
    """Criteria for listing transactions. Unset fields do not filter."""

    owner_id: Optional[str] = None
    company_id: Optional[UUID] = None
    status: Optional[TransactionStatus] = None
    created_from: Optional[datetime] = None  # inclusive
    created_before: Optional[datetime] = None  # exclusive


class LedgerStore(ABC):
    """
    Abstract store for accounts, transactions and their reference data.

    Implementations must make every write issued inside ``atomic()`` land
    together or not at all, and must serialize concurrent read-modify-write
    cycles on one account row when ``get_account(..., for_update=True)`` is used.
    """

    @abstractmethod
    def atomic(self) -> AsyncContextManager[None]:
        """
        Scope a unit of work.

        Commits when the block exits normally; rolls back every write made in
        the block when it raises, then re-raises.
        """
        ...

    @abstractmethod
    async def ping(self) -> None:
        """
        Check that the backing store is reachable.

        Raises:
            StorageException: If the store cannot be reached
        """
        ...

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_account(
        self,
        account_id: UUID,
        for_update: bool = False,
    ) -> Optional[BankAccount]:
        """
        Retrieve an account by ID.

        Args:
            account_id: The account's unique identifier
            for_update: Lock the row until the enclosing unit of work ends

        Returns:
            The account if found, None otherwise
        """
        ...

    @abstractmethod
    async def set_account_balance(self, account_id: UUID, balance: Decimal) -> None:
        """Overwrite an account's current balance."""
        ...

    @abstractmethod
    async def list_accounts(self) -> List[BankAccount]:
        """Retrieve all accounts."""
        ...

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        """
        Retrieve a transaction by ID.

        Returns:
            The transaction if found, None otherwise
        """
        ...

    @abstractmethod
    async def create_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    @abstractmethod
    async def update_transaction(
        self,
        transaction_id: UUID,
        fields: Dict[str, Any],
        expected: Optional[TransactionStatus] = None,
    ) -> Optional[Transaction]:
        """
        Overwrite the given fields and bump ``updated_at``.

        When ``expected`` is given the write only happens if the stored status
        still equals it.

        Returns:
            The updated transaction, or None if it does not exist or its
            status was no longer ``expected``
        """
        ...

    @abstractmethod
    async def set_transaction_status(
        self,
        transaction_id: UUID,
        status: TransactionStatus,
        expected: TransactionStatus,
    ) -> Optional[Transaction]:
        """
        Conditionally change a transaction's status.

        The change is applied only if the stored status still equals
        ``expected``; of several concurrent callers at most one succeeds.

        Returns:
            The updated transaction, or None if it does not exist or its
            status was no longer ``expected``
        """
        ...

    @abstractmethod
    async def delete_transaction(self, transaction_id: UUID) -> None:
        """Remove a transaction. Deleting a missing transaction is a no-op."""
        ...

    @abstractmethod
    async def list_transactions(self, filters: TransactionFilters) -> List[Transaction]:
        """
        Retrieve transactions matching the filters.

        Returns:
            Matching transactions, ordered by created_at descending
        """
        ...

    # -------------------------------------------------------------------------
    # Reference data
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_company(self, company_id: UUID) -> Optional[Reference]:
        ...

    @abstractmethod
    async def get_category(self, category_id: UUID) -> Optional[Reference]:
        ...

    @abstractmethod
    async def get_client(self, client_id: UUID) -> Optional[Reference]:
        ...

    @abstractmethod
    async def list_companies(self) -> List[Reference]:
        ...

    @abstractmethod
    async def list_categories(self) -> List[Reference]:
        ...

    @abstractmethod
    async def list_clients(self) -> List[Reference]:
        ...
