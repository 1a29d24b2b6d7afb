"""
Read-side rollups over approved transactions.

All functions here are pure: they take already-fetched transactions and
reference rows and return totals. Only approved transactions are counted,
whatever the caller passes in. Sums are accumulated as ``Decimal``.
"""

from decimal import Decimal
from typing import Callable, Iterable, List, Optional
from uuid import UUID

from src.domain.entities import (
    BankAccount,
    Reference,
    Transaction,
    TransactionStatus,
    TransactionType,
)

from .models import AccountTotals, GroupTotals, ProfitLoss

ZERO = Decimal("0")


def _approved(transactions: Iterable[Transaction]) -> List[Transaction]:
    return [t for t in transactions if t.status is TransactionStatus.APPROVED]


def _sum(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.converted_base_amount for t in transactions), ZERO)


def summarize(transactions: Iterable[Transaction]) -> ProfitLoss:
    """
    Overall income and expense across all approved transactions.

    Transfers move money between accounts and contribute to neither side.
    """
    approved = _approved(transactions)
    return ProfitLoss(
        income=_sum(t for t in approved if t.type is TransactionType.INCOME),
        expense=_sum(t for t in approved if t.type is TransactionType.EXPENSE),
    )


def group_totals(
    transactions: Iterable[Transaction],
    groups: Iterable[Reference],
    key: Callable[[Transaction], Optional[UUID]],
) -> List[GroupTotals]:
    """
    Income and expense per reference row.

    Args:
        transactions: Transactions to aggregate
        groups: Companies, clients or categories to report on, in output order
        key: Extracts the group id from a transaction

    Returns:
        One row per group with any activity; empty groups are dropped
    """
    approved = _approved(transactions)
    rows = []
    for group in groups:
        members = [t for t in approved if key(t) == group.id]
        totals = GroupTotals(
            id=group.id,
            name=group.name,
            income=_sum(t for t in members if t.type is TransactionType.INCOME),
            expense=_sum(t for t in members if t.type is TransactionType.EXPENSE),
        )
        if not totals.is_empty:
            rows.append(totals)
    return rows


def by_company(transactions, companies) -> List[GroupTotals]:
    return group_totals(transactions, companies, lambda t: t.company_id)


def by_client(transactions, clients) -> List[GroupTotals]:
    return group_totals(transactions, clients, lambda t: t.client_id)


def by_category(transactions, categories) -> List[GroupTotals]:
    return group_totals(transactions, categories, lambda t: t.category_id)


def by_bank_account(
    transactions: Iterable[Transaction],
    accounts: Iterable[BankAccount],
) -> List[AccountTotals]:
    """
    Per-account income, expense and transfer legs.

    Income and expense count against ``from_account_id``; a transfer counts
    as ``transfer_out`` on its source and ``transfer_in`` on its destination.
    """
    approved = _approved(transactions)
    rows = []
    for account in accounts:
        outgoing = [t for t in approved if t.from_account_id == account.id]
        incoming = [t for t in approved if t.to_account_id == account.id]
        totals = AccountTotals(
            id=account.id,
            name=account.name,
            income=_sum(t for t in outgoing if t.type is TransactionType.INCOME),
            expense=_sum(t for t in outgoing if t.type is TransactionType.EXPENSE),
            transfer_in=_sum(t for t in incoming if t.type is TransactionType.TRANSFER),
            transfer_out=_sum(t for t in outgoing if t.type is TransactionType.TRANSFER),
        )
        if not totals.is_empty:
            rows.append(totals)
    return rows
