"""
Posting rules for the Ledger Desk posting engine.

A posting is the signed effect an approved transaction has on one or two
account balances. This module only computes the legs; applying them
against the store is the lifecycle service's job.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List
from uuid import UUID

from src.domain.entities import Transaction, TransactionType


@dataclass(frozen=True)
class PostingLeg:
    """Signed balance change for one account."""

    account_id: UUID
    delta: Decimal


def posting_legs(transaction: Transaction) -> List[PostingLeg]:
    """
    Compute the balance changes an approved transaction causes.

    | type     | from_account | to_account |
    |----------|--------------|------------|
    | income   | +amount      | -          |
    | expense  | -amount      | -          |
    | transfer | -amount      | +amount    |

    Legs are returned in ascending account-id order so that callers locking
    rows in that order cannot deadlock against each other.

    Args:
        transaction: A validated transaction

    Returns:
        One leg for income/expense, two for a transfer

    Raises:
        ValueError: If an account the type needs is missing
    """
    amount = transaction.converted_base_amount

    if transaction.type is TransactionType.TRANSFER:
        if transaction.from_account_id is None or transaction.to_account_id is None:
            raise ValueError("transfer needs both from_account_id and to_account_id")
        legs = [
            PostingLeg(account_id=transaction.from_account_id, delta=-amount),
            PostingLeg(account_id=transaction.to_account_id, delta=amount),
        ]
    else:
        if transaction.from_account_id is None:
            raise ValueError(f"{transaction.type.value} needs from_account_id")
        sign = 1 if transaction.type is TransactionType.INCOME else -1
        legs = [PostingLeg(account_id=transaction.from_account_id, delta=sign * amount)]

    return sorted(legs, key=lambda leg: str(leg.account_id))


def apply_leg(balance: Decimal, leg: PostingLeg) -> Decimal:
    """New balance after applying a leg."""
    return balance + leg.delta
