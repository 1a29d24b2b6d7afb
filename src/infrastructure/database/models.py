"""SQLAlchemy ORM models for ledger entities."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


# Money and rate column types
Money = Numeric(15, 2)
Rate = Numeric(10, 4)


class Base(DeclarativeBase):
    pass


class CompanyModel(Base):
    """Company a transaction is booked against."""

    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class CategoryModel(Base):
    """Income/expense category."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class ClientModel(Base):
    """Client a transaction is attributed to."""

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class BankAccountModel(Base):
    """Persisted bank account. ``current_balance`` is written only by posting."""

    __tablename__ = "bank_accounts"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    initial_balance: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0.00"),
    )
    current_balance: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0.00"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )


class TransactionModel(Base):
    """Persisted income, expense or transfer."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_new_id)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    conversion_rate: Mapped[Decimal | None] = mapped_column(Rate, nullable=True)
    converted_base_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    company_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("companies.id"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("categories.id"),
        nullable=True,
    )
    client_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("clients.id"),
        nullable=True,
    )
    from_account_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("bank_accounts.id"),
        nullable=True,
    )
    to_account_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("bank_accounts.id"),
        nullable=True,
    )
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
