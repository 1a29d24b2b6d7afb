"""Pydantic schemas for API request/response validation."""

from .transaction import (
    CreateTransactionSchema,
    UpdateTransactionSchema,
    TransactionResponseSchema,
    AccountResponseSchema,
)
from .report import (
    ProfitLossSchema,
    GroupReportRowSchema,
    AccountReportRowSchema,
)
from .error import ErrorResponseSchema, FieldErrorSchema

__all__ = [
    "CreateTransactionSchema",
    "UpdateTransactionSchema",
    "TransactionResponseSchema",
    "AccountResponseSchema",
    "ProfitLossSchema",
    "GroupReportRowSchema",
    "AccountReportRowSchema",
    "ErrorResponseSchema",
    "FieldErrorSchema",
]
