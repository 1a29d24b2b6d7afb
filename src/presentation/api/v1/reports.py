"""Report API endpoints."""

from dataclasses import asdict
from datetime import date
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from src.application.dto import ReportPeriod
from src.application.services import ReportService
from src.core.dependencies import get_current_actor, get_report_service
from src.domain.entities import Actor
from src.presentation.schemas import (
    AccountReportRowSchema,
    ErrorResponseSchema,
    GroupReportRowSchema,
    ProfitLossSchema,
)

report_router = APIRouter(
    prefix="/reports",
    dependencies=[Depends(get_current_actor)],
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid date range"},
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
    },
)


async def get_report_period(
    start_date: Annotated[Optional[date], Query(description="First day, inclusive")] = None,
    end_date: Annotated[Optional[date], Query(description="Last day, inclusive")] = None,
    company_id: Annotated[Optional[UUID], Query()] = None,
) -> ReportPeriod:
    return ReportPeriod(start_date=start_date, end_date=end_date, company_id=company_id)


Period = Annotated[ReportPeriod, Depends(get_report_period)]
Service = Annotated[ReportService, Depends(get_report_service)]


@report_router.get(
    "/profit-loss",
    response_model=ProfitLossSchema,
    summary="Profit & Loss",
    description="Total approved income and expense in the period.",
)
async def profit_loss(period: Period, service: Service) -> ProfitLossSchema:
    return ProfitLossSchema(**asdict(await service.profit_loss(period)))


@report_router.get(
    "/by-company",
    response_model=list[GroupReportRowSchema],
    summary="Totals by Company",
)
async def report_by_company(period: Period, service: Service) -> list[GroupReportRowSchema]:
    return [GroupReportRowSchema(**asdict(row)) for row in await service.by_company(period)]


@report_router.get(
    "/by-client",
    response_model=list[GroupReportRowSchema],
    summary="Totals by Client",
)
async def report_by_client(period: Period, service: Service) -> list[GroupReportRowSchema]:
    return [GroupReportRowSchema(**asdict(row)) for row in await service.by_client(period)]


@report_router.get(
    "/by-category",
    response_model=list[GroupReportRowSchema],
    summary="Totals by Category",
)
async def report_by_category(period: Period, service: Service) -> list[GroupReportRowSchema]:
    return [GroupReportRowSchema(**asdict(row)) for row in await service.by_category(period)]


@report_router.get(
    "/by-bank-account",
    response_model=list[AccountReportRowSchema],
    summary="Totals by Bank Account",
    description="Income, expense and transfer legs per account.",
)
async def report_by_bank_account(
    period: Period,
    service: Service,
) -> list[AccountReportRowSchema]:
    return [
        AccountReportRowSchema(**asdict(row)) for row in await service.by_bank_account(period)
    ]


@report_router.get(
    "/export.csv",
    summary="Export Transactions as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_csv(period: Period, service: Service) -> Response:
    content = await service.export_csv(period)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=transactions.csv"},
    )
