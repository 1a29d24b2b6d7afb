"""CSV rendering of approved transactions."""

import csv
import io
from decimal import Decimal
from typing import Dict, Iterable, Optional
from uuid import UUID

from src.domain.entities import Reference, Transaction, TransactionStatus
from src.service.ledger.conversion import quantize_money

CSV_HEADER = [
    "Date",
    "Type",
    "Company",
    "Category",
    "Client",
    "Amount",
    "Currency",
    "INR Amount",
    "Description",
]


def _money(value: Decimal) -> str:
    return str(quantize_money(value))


def _name(lookup: Dict[UUID, str], ref_id: Optional[UUID]) -> str:
    if ref_id is None:
        return ""
    return lookup.get(ref_id, str(ref_id))


def render_transactions_csv(
    transactions: Iterable[Transaction],
    companies: Iterable[Reference],
    categories: Iterable[Reference],
    clients: Iterable[Reference],
) -> str:
    """
    Render approved transactions as CSV.

    The description column is always quoted; other columns are quoted only
    when they contain a delimiter, quote or line break. Embedded quotes are
    doubled.

    Returns:
        CSV text with a header row and one row per approved transaction
    """
    company_names = {ref.id: ref.name for ref in companies}
    category_names = {ref.id: ref.name for ref in categories}
    client_names = {ref.id: ref.name for ref in clients}

    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADER)

    # Leading columns end with the delimiter so the description writer can
    # finish the same line.
    leading = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator=",")
    description = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    for txn in transactions:
        if txn.status is not TransactionStatus.APPROVED:
            continue
        leading.writerow([
            txn.created_at.date().isoformat(),
            txn.type.value,
            _name(company_names, txn.company_id),
            _name(category_names, txn.category_id),
            _name(client_names, txn.client_id),
            _money(txn.amount),
            txn.currency.value,
            _money(txn.converted_base_amount),
        ])
        description.writerow([txn.description or ""])

    return buffer.getvalue()
