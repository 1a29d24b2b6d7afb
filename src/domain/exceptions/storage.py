"""Ledger store failures."""

from .base import DomainException


class StorageException(DomainException):
    """Raised when the underlying store fails during a read or write."""

    def __init__(self, message: str):
        super().__init__(message=message, code="STORAGE_ERROR")
