"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .validation import FieldError, ValidationException
from .transaction import InvalidStateException
from .not_found import (
    NotFoundException,
    TransactionNotFoundException,
    AccountNotFoundException,
    ReferenceNotFoundException,
)
from .auth import AuthenticationRequiredException, AuthorizationException
from .storage import StorageException

__all__ = [
    "DomainException",
    "FieldError",
    "ValidationException",
    "InvalidStateException",
    "NotFoundException",
    "TransactionNotFoundException",
    "AccountNotFoundException",
    "ReferenceNotFoundException",
    "AuthenticationRequiredException",
    "AuthorizationException",
    "StorageException",
]
