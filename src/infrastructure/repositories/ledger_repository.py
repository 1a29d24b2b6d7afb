"""PostgreSQL implementation of LedgerStore."""

import functools
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import UUID

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    BankAccount,
    Currency,
    Reference,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from src.domain.entities.transaction import utcnow
from src.domain.exceptions import StorageException
from src.domain.interfaces import LedgerStore, TransactionFilters
from src.infrastructure.database.models import (
    BankAccountModel,
    CategoryModel,
    ClientModel,
    CompanyModel,
    TransactionModel,
)

logger = structlog.get_logger(__name__)


def translate_storage_errors(method):
    """Surface driver and ORM failures as StorageException."""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error(
                "storage_operation_failed",
                operation=method.__name__,
                error=str(exc),
            )
            raise StorageException(f"Storage failure during {method.__name__}") from exc

    return wrapper


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _opt_uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value is not None else None


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    return value


class PostgresLedgerStore(LedgerStore):
    """
    PostgreSQL implementation of the ledger store.

    One instance wraps one request-scoped AsyncSession. Account reads with
    ``for_update=True`` issue ``SELECT ... FOR UPDATE`` so concurrent postings
    to one account queue behind each other until the enclosing unit of work
    commits or rolls back.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("unit_of_work_failed", error=str(exc))
            raise StorageException("Storage failure; no changes were applied") from exc
        except BaseException:
            await self._session.rollback()
            raise

    @translate_storage_errors
    async def ping(self) -> None:
        await self._session.execute(select(1))

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @translate_storage_errors
    async def get_account(
        self,
        account_id: UUID,
        for_update: bool = False,
    ) -> Optional[BankAccount]:
        stmt = (
            select(BankAccountModel)
            .where(BankAccountModel.id == str(account_id))
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._account_to_entity(model)

    @translate_storage_errors
    async def set_account_balance(self, account_id: UUID, balance: Decimal) -> None:
        stmt = (
            update(BankAccountModel)
            .where(BankAccountModel.id == str(account_id))
            .values(current_balance=balance)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    @translate_storage_errors
    async def list_accounts(self) -> List[BankAccount]:
        stmt = select(BankAccountModel).order_by(BankAccountModel.name)
        result = await self._session.execute(stmt)
        return [self._account_to_entity(model) for model in result.scalars().all()]

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @translate_storage_errors
    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.id == str(transaction_id))
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._transaction_to_entity(model)

    @translate_storage_errors
    async def create_transaction(self, transaction: Transaction) -> Transaction:
        model = TransactionModel(
            id=str(transaction.id),
            type=transaction.type.value,
            status=transaction.status.value,
            amount=transaction.amount,
            currency=transaction.currency.value,
            conversion_rate=transaction.conversion_rate,
            converted_base_amount=transaction.converted_base_amount,
            company_id=str(transaction.company_id),
            category_id=_column_value(transaction.category_id),
            client_id=_column_value(transaction.client_id),
            from_account_id=_column_value(transaction.from_account_id),
            to_account_id=_column_value(transaction.to_account_id),
            owner_id=transaction.owner_id,
            description=transaction.description,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )

        self._session.add(model)
        await self._session.flush()

        return transaction

    @translate_storage_errors
    async def update_transaction(
        self,
        transaction_id: UUID,
        fields: Dict[str, Any],
        expected: Optional[TransactionStatus] = None,
    ) -> Optional[Transaction]:
        values = {name: _column_value(value) for name, value in fields.items()}
        values["updated_at"] = utcnow()
        return await self._conditional_update(transaction_id, values, expected)

    @translate_storage_errors
    async def set_transaction_status(
        self,
        transaction_id: UUID,
        status: TransactionStatus,
        expected: TransactionStatus,
    ) -> Optional[Transaction]:
        values = {"status": status.value, "updated_at": utcnow()}
        return await self._conditional_update(transaction_id, values, expected)

    @translate_storage_errors
    async def delete_transaction(self, transaction_id: UUID) -> None:
        stmt = (
            delete(TransactionModel)
            .where(TransactionModel.id == str(transaction_id))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    @translate_storage_errors
    async def list_transactions(self, filters: TransactionFilters) -> List[Transaction]:
        stmt = select(TransactionModel)

        if filters.owner_id is not None:
            stmt = stmt.where(TransactionModel.owner_id == filters.owner_id)
        if filters.company_id is not None:
            stmt = stmt.where(TransactionModel.company_id == str(filters.company_id))
        if filters.status is not None:
            stmt = stmt.where(TransactionModel.status == filters.status.value)
        if filters.created_from is not None:
            stmt = stmt.where(TransactionModel.created_at >= filters.created_from)
        if filters.created_before is not None:
            stmt = stmt.where(TransactionModel.created_at < filters.created_before)

        stmt = stmt.order_by(TransactionModel.created_at.desc()).execution_options(
            populate_existing=True
        )
        result = await self._session.execute(stmt)

        return [self._transaction_to_entity(model) for model in result.scalars().all()]

    # -------------------------------------------------------------------------
    # Reference data
    # -------------------------------------------------------------------------

    async def get_company(self, company_id: UUID) -> Optional[Reference]:
        return await self._get_reference(CompanyModel, company_id)

    async def get_category(self, category_id: UUID) -> Optional[Reference]:
        return await self._get_reference(CategoryModel, category_id)

    async def get_client(self, client_id: UUID) -> Optional[Reference]:
        return await self._get_reference(ClientModel, client_id)

    async def list_companies(self) -> List[Reference]:
        return await self._list_references(CompanyModel)

    async def list_categories(self) -> List[Reference]:
        return await self._list_references(CategoryModel)

    async def list_clients(self) -> List[Reference]:
        return await self._list_references(ClientModel)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _conditional_update(
        self,
        transaction_id: UUID,
        values: Dict[str, Any],
        expected: Optional[TransactionStatus],
    ) -> Optional[Transaction]:
        """
        Write ``values`` only while the stored status equals ``expected``.

        The status check and the write are a single UPDATE statement, so two
        callers racing on one row cannot both match.
        """
        stmt = update(TransactionModel).where(TransactionModel.id == str(transaction_id))
        if expected is not None:
            stmt = stmt.where(TransactionModel.status == expected.value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        return await self.get_transaction(transaction_id)

    @translate_storage_errors
    async def _get_reference(self, model_cls, ref_id: UUID) -> Optional[Reference]:
        stmt = select(model_cls).where(model_cls.id == str(ref_id))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return Reference(id=UUID(model.id), name=model.name)

    @translate_storage_errors
    async def _list_references(self, model_cls) -> List[Reference]:
        stmt = select(model_cls).order_by(model_cls.name)
        result = await self._session.execute(stmt)
        return [Reference(id=UUID(m.id), name=m.name) for m in result.scalars().all()]

    def _account_to_entity(self, model: BankAccountModel) -> BankAccount:
        """Convert database model to domain entity."""
        return BankAccount(
            id=UUID(model.id),
            name=model.name,
            owner_id=model.owner_id,
            initial_balance=model.initial_balance,
            current_balance=model.current_balance,
            created_at=_as_utc(model.created_at),
        )

    def _transaction_to_entity(self, model: TransactionModel) -> Transaction:
        """Convert database model to domain entity."""
        return Transaction(
            id=UUID(model.id),
            type=TransactionType(model.type),
            status=TransactionStatus(model.status),
            amount=model.amount,
            currency=Currency(model.currency),
            conversion_rate=model.conversion_rate,
            converted_base_amount=model.converted_base_amount,
            company_id=UUID(model.company_id),
            category_id=_opt_uuid(model.category_id),
            client_id=_opt_uuid(model.client_id),
            from_account_id=_opt_uuid(model.from_account_id),
            to_account_id=_opt_uuid(model.to_account_id),
            owner_id=model.owner_id,
            description=model.description,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )
