"""Dependency injection for FastAPI."""

from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Actor, Role
from src.domain.exceptions import AuthenticationRequiredException
from src.domain.interfaces import LedgerStore
from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import PostgresLedgerStore
from src.application.services import AccountService, ReportService, TransactionService


# Store dependencies
async def get_ledger_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> LedgerStore:
    """Get a LedgerStore bound to the request's session."""
    return PostgresLedgerStore(session)


# Caller identity
async def get_current_actor(
    x_actor_id: Annotated[Optional[str], Header()] = None,
    x_actor_role: Annotated[Optional[str], Header()] = None,
) -> Actor:
    """
    Resolve the caller from identity headers set by the upstream gateway.

    Raises:
        AuthenticationRequiredException: If either header is missing or the
            role is not recognised
    """
    actor_id = (x_actor_id or "").strip()
    if not actor_id or not x_actor_role:
        raise AuthenticationRequiredException()

    try:
        role = Role(x_actor_role.strip().lower())
    except ValueError:
        raise AuthenticationRequiredException(f"Unknown role: {x_actor_role}")

    return Actor(id=actor_id, role=role)


# Service dependencies
async def get_transaction_service(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> TransactionService:
    """Get a TransactionService instance."""
    return TransactionService(ledger_store=store)


async def get_report_service(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> ReportService:
    """Get a ReportService instance."""
    return ReportService(ledger_store=store)


async def get_account_service(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> AccountService:
    """Get an AccountService instance."""
    return AccountService(ledger_store=store)
