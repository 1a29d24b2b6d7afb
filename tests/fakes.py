"""In-memory test double for the ledger store."""

import asyncio
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import replace
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID, uuid4

from src.domain.entities import (
    BankAccount,
    Reference,
    Transaction,
)
from src.domain.entities.transaction import utcnow
from src.domain.exceptions import StorageException
from src.domain.interfaces import LedgerStore, TransactionFilters


# =============================================================================
# In-memory store
# =============================================================================

class InMemoryLedgerStore(LedgerStore):
    """
    Dict-backed LedgerStore for exercising the lifecycle engine.

    Writes made inside ``atomic()`` are journaled and undone if the block
    raises. With ``serialize=True`` atomic scopes run one at a time, like
    row-locked database transactions; with ``serialize=False`` they
    interleave at every read, so only the conditional status update keeps
    concurrent approvals apart.
    """

    def __init__(self, serialize: bool = True):
        self.serialize = serialize
        self.accounts: Dict[UUID, BankAccount] = {}
        self.transactions: Dict[UUID, Transaction] = {}
        self.companies: Dict[UUID, Reference] = {}
        self.categories: Dict[UUID, Reference] = {}
        self.clients: Dict[UUID, Reference] = {}
        self.commits = 0
        self.rollbacks = 0
        self.balance_writes: List[UUID] = []
        self.fail_balance_write_for: Optional[UUID] = None
        self.reachable = True
        self._lock = asyncio.Lock()
        self._journal: ContextVar[Optional[List[Callable[[], None]]]] = ContextVar(
            "journal", default=None
        )

    # ---- seeding --------------------------------------------------------

    def add_account(
        self,
        name: str,
        balance: str = "0.00",
        owner_id: str = "admin-1",
        account_id: Optional[UUID] = None,
    ) -> BankAccount:
        account = BankAccount(
            id=account_id or uuid4(),
            name=name,
            owner_id=owner_id,
            initial_balance=Decimal(balance),
            current_balance=Decimal(balance),
        )
        self.accounts[account.id] = account
        return account

    def add_company(self, name: str) -> Reference:
        ref = Reference(id=uuid4(), name=name)
        self.companies[ref.id] = ref
        return ref

    def add_category(self, name: str) -> Reference:
        ref = Reference(id=uuid4(), name=name)
        self.categories[ref.id] = ref
        return ref

    def add_client(self, name: str) -> Reference:
        ref = Reference(id=uuid4(), name=name)
        self.clients[ref.id] = ref
        return ref

    def balance(self, account_id: UUID) -> Decimal:
        return self.accounts[account_id].current_balance

    # ---- unit of work ---------------------------------------------------

    @asynccontextmanager
    async def atomic(self):
        if self.serialize:
            async with self._lock:
                async with self._unit():
                    yield
        else:
            async with self._unit():
                yield

    @asynccontextmanager
    async def _unit(self):
        journal: List[Callable[[], None]] = []
        token = self._journal.set(journal)
        try:
            yield
        except BaseException:
            for undo in reversed(journal):
                undo()
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            self._journal.reset(token)

    def _remember(self, table: Dict[UUID, Any], key: UUID) -> None:
        journal = self._journal.get()
        if journal is None:
            return
        if key in table:
            previous = table[key]
            journal.append(lambda: table.__setitem__(key, previous))
        else:
            journal.append(lambda: table.pop(key, None))

    async def ping(self):
        if not self.reachable:
            raise StorageException("store unreachable")

    # ---- accounts -------------------------------------------------------

    async def get_account(self, account_id, for_update=False):
        await asyncio.sleep(0)
        account = self.accounts.get(account_id)
        return replace(account) if account else None

    async def set_account_balance(self, account_id, balance):
        if account_id == self.fail_balance_write_for:
            raise StorageException("simulated write failure")
        self._remember(self.accounts, account_id)
        self.accounts[account_id] = replace(self.accounts[account_id], current_balance=balance)
        self.balance_writes.append(account_id)

    async def list_accounts(self):
        await asyncio.sleep(0)
        return sorted((replace(a) for a in self.accounts.values()), key=lambda a: a.name)

    # ---- transactions ---------------------------------------------------

    async def get_transaction(self, transaction_id):
        await asyncio.sleep(0)
        txn = self.transactions.get(transaction_id)
        return replace(txn) if txn else None

    async def create_transaction(self, transaction):
        self._remember(self.transactions, transaction.id)
        self.transactions[transaction.id] = replace(transaction)
        return replace(transaction)

    async def update_transaction(self, transaction_id, fields, expected=None):
        current = self.transactions.get(transaction_id)
        if current is None or (expected is not None and current.status is not expected):
            return None
        self._remember(self.transactions, transaction_id)
        updated = replace(current, **fields, updated_at=utcnow())
        self.transactions[transaction_id] = updated
        return replace(updated)

    async def set_transaction_status(self, transaction_id, status, expected):
        return await self.update_transaction(transaction_id, {"status": status}, expected)

    async def delete_transaction(self, transaction_id):
        if transaction_id in self.transactions:
            self._remember(self.transactions, transaction_id)
            del self.transactions[transaction_id]

    async def list_transactions(self, filters: TransactionFilters):
        await asyncio.sleep(0)
        result = [
            replace(t)
            for t in self.transactions.values()
            if (filters.owner_id is None or t.owner_id == filters.owner_id)
            and (filters.company_id is None or t.company_id == filters.company_id)
            and (filters.status is None or t.status is filters.status)
            and (filters.created_from is None or t.created_at >= filters.created_from)
            and (filters.created_before is None or t.created_at < filters.created_before)
        ]
        return sorted(result, key=lambda t: t.created_at, reverse=True)

    # ---- reference data -------------------------------------------------

    async def get_company(self, company_id):
        return self.companies.get(company_id)

    async def get_category(self, category_id):
        return self.categories.get(category_id)

    async def get_client(self, client_id):
        return self.clients.get(client_id)

    async def list_companies(self):
        return sorted(self.companies.values(), key=lambda r: r.name)

    async def list_categories(self):
        return sorted(self.categories.values(), key=lambda r: r.name)

    async def list_clients(self):
        return sorted(self.clients.values(), key=lambda r: r.name)
