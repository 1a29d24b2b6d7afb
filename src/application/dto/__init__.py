"""Data Transfer Objects for application layer."""

from .transaction import (
    CreateTransactionRequest,
    UpdateTransactionRequest,
    TransactionResponse,
    AccountResponse,
)
from .report import (
    ReportPeriod,
    ProfitLossResponse,
    GroupReportRow,
    AccountReportRow,
)

__all__ = [
    "CreateTransactionRequest",
    "UpdateTransactionRequest",
    "TransactionResponse",
    "AccountResponse",
    "ReportPeriod",
    "ProfitLossResponse",
    "GroupReportRow",
    "AccountReportRow",
]
