"""Database infrastructure."""

from .connection import (
    get_db_session,
    normalize_database_url,
    DatabaseSessionManager,
    db_manager,
)
from .models import (
    Base,
    BankAccountModel,
    CategoryModel,
    ClientModel,
    CompanyModel,
    TransactionModel,
)

__all__ = [
    "get_db_session",
    "normalize_database_url",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "BankAccountModel",
    "CategoryModel",
    "ClientModel",
    "CompanyModel",
    "TransactionModel",
]
