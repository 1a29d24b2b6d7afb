"""Data transfer objects for reporting operations."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from src.domain.entities import TransactionStatus
from src.domain.exceptions import FieldError
from src.domain.interfaces import TransactionFilters
from src.service.ledger import quantize_money
from src.service.reporting import AccountTotals, GroupTotals, ProfitLoss


def day_start(day: date) -> datetime:
    """Midnight UTC at the start of ``day``."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ReportPeriod:
    """
    Date range (inclusive on both ends) and optional company scope.

    An unset bound leaves that side of the range open.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    company_id: Optional[UUID] = None

    def validate(self) -> List[FieldError]:
        errors = []

        if self.start_date and self.end_date and self.start_date > self.end_date:
            errors.append(FieldError("start_date", "start_date must not be after end_date"))

        return errors

    def to_filters(
        self,
        status: Optional[TransactionStatus] = TransactionStatus.APPROVED,
        owner_id: Optional[str] = None,
    ) -> TransactionFilters:
        return TransactionFilters(
            owner_id=owner_id,
            company_id=self.company_id,
            status=status,
            created_from=day_start(self.start_date) if self.start_date else None,
            created_before=(
                day_start(self.end_date + timedelta(days=1)) if self.end_date else None
            ),
        )


def _money(value) -> str:
    return str(quantize_money(value))


@dataclass(frozen=True)
class ProfitLossResponse:
    income: str
    expense: str
    net: str

    @classmethod
    def from_totals(cls, totals: ProfitLoss) -> "ProfitLossResponse":
        return cls(
            income=_money(totals.income),
            expense=_money(totals.expense),
            net=_money(totals.net),
        )


@dataclass(frozen=True)
class GroupReportRow:
    """Income/expense row for a company, client or category."""

    id: str
    name: str
    income: str
    expense: str
    net: str

    @classmethod
    def from_totals(cls, totals: GroupTotals) -> "GroupReportRow":
        return cls(
            id=str(totals.id),
            name=totals.name,
            income=_money(totals.income),
            expense=_money(totals.expense),
            net=_money(totals.net),
        )


@dataclass(frozen=True)
class AccountReportRow:
    """Per-account row including transfer legs."""

    id: str
    name: str
    income: str
    expense: str
    transfer_in: str
    transfer_out: str
    net: str

    @classmethod
    def from_totals(cls, totals: AccountTotals) -> "AccountReportRow":
        return cls(
            id=str(totals.id),
            name=totals.name,
            income=_money(totals.income),
            expense=_money(totals.expense),
            transfer_in=_money(totals.transfer_in),
            transfer_out=_money(totals.transfer_out),
            net=_money(totals.net),
        )
