"""Application services (use cases)."""

from .transaction_service import TransactionService
from .report_service import ReportService
from .account_service import AccountService

__all__ = [
    "TransactionService",
    "ReportService",
    "AccountService",
]
