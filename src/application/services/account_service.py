"""Account service - bank account balance lookups."""

import structlog

from src.application.dto import AccountResponse
from src.domain.interfaces import LedgerStore

logger = structlog.get_logger(__name__)


class AccountService:
    """
    Application service for bank accounts.

    Balances are read-only here; they only move when a transaction posts.
    """

    def __init__(self, ledger_store: LedgerStore):
        self._store = ledger_store

    async def list_accounts(self) -> list[AccountResponse]:
        """
        Retrieve every bank account with its current balance.

        Returns:
            List of AccountResponse objects
        """
        accounts = await self._store.list_accounts()

        logger.info("accounts_listed", count=len(accounts))

        return [AccountResponse.from_entity(account) for account in accounts]
