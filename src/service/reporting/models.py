"""Report row types produced by the aggregator."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class ProfitLoss:
    """Overall income and expense totals in base currency."""

    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class GroupTotals:
    """Totals for one company, client or category."""

    id: UUID
    name: str
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def is_empty(self) -> bool:
        return self.income == 0 and self.expense == 0


@dataclass(frozen=True)
class AccountTotals:
    """Totals for one bank account, including both transfer legs."""

    id: UUID
    name: str
    income: Decimal
    expense: Decimal
    transfer_in: Decimal
    transfer_out: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense + self.transfer_in - self.transfer_out

    @property
    def is_empty(self) -> bool:
        return (
            self.income == 0
            and self.expense == 0
            and self.transfer_in == 0
            and self.transfer_out == 0
        )
