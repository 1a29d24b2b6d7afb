"""Report service - read-only rollups over approved transactions."""

from typing import List

import structlog

from src.application.dto import (
    AccountReportRow,
    GroupReportRow,
    ProfitLossResponse,
    ReportPeriod,
)
from src.core.metrics import record_report
from src.domain.entities import Transaction
from src.domain.exceptions import ValidationException
from src.domain.interfaces import LedgerStore
from src.service.reporting import (
    by_bank_account,
    by_category,
    by_client,
    by_company,
    render_transactions_csv,
    summarize,
)

logger = structlog.get_logger(__name__)


class ReportService:
    """
    Application service for financial reports.

    Every report covers approved transactions created within the period
    (both dates inclusive), optionally limited to one company.
    """

    def __init__(self, ledger_store: LedgerStore):
        self._store = ledger_store

    async def profit_loss(self, period: ReportPeriod) -> ProfitLossResponse:
        transactions = await self._approved(period, "profit_loss")
        return ProfitLossResponse.from_totals(summarize(transactions))

    async def by_company(self, period: ReportPeriod) -> List[GroupReportRow]:
        transactions = await self._approved(period, "by_company")
        companies = await self._store.list_companies()
        return [GroupReportRow.from_totals(row) for row in by_company(transactions, companies)]

    async def by_client(self, period: ReportPeriod) -> List[GroupReportRow]:
        transactions = await self._approved(period, "by_client")
        clients = await self._store.list_clients()
        return [GroupReportRow.from_totals(row) for row in by_client(transactions, clients)]

    async def by_category(self, period: ReportPeriod) -> List[GroupReportRow]:
        transactions = await self._approved(period, "by_category")
        categories = await self._store.list_categories()
        return [
            GroupReportRow.from_totals(row) for row in by_category(transactions, categories)
        ]

    async def by_bank_account(self, period: ReportPeriod) -> List[AccountReportRow]:
        transactions = await self._approved(period, "by_bank_account")
        accounts = await self._store.list_accounts()
        return [
            AccountReportRow.from_totals(row)
            for row in by_bank_account(transactions, accounts)
        ]

    async def export_csv(self, period: ReportPeriod) -> str:
        """
        Render approved transactions in the period as CSV.

        Returns:
            CSV text, header first, one row per transaction
        """
        transactions = await self._approved(period, "export_csv")
        return render_transactions_csv(
            transactions,
            companies=await self._store.list_companies(),
            categories=await self._store.list_categories(),
            clients=await self._store.list_clients(),
        )

    async def _approved(self, period: ReportPeriod, report: str) -> List[Transaction]:
        errors = period.validate()
        if errors:
            raise ValidationException(errors)

        transactions = await self._store.list_transactions(period.to_filters())
        record_report(report)

        logger.info(
            "report_generated",
            report=report,
            start_date=period.start_date.isoformat() if period.start_date else None,
            end_date=period.end_date.isoformat() if period.end_date else None,
            company_id=str(period.company_id) if period.company_id else None,
            transactions=len(transactions),
        )

        return transactions
