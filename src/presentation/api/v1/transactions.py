"""Transaction lifecycle API endpoints."""

from dataclasses import asdict
from datetime import date
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response

from src.application.dto import CreateTransactionRequest, UpdateTransactionRequest
from src.application.services import TransactionService
from src.core.dependencies import get_current_actor, get_transaction_service
from src.domain.entities import Actor, TransactionStatus
from src.presentation.schemas import (
    CreateTransactionSchema,
    ErrorResponseSchema,
    TransactionResponseSchema,
    UpdateTransactionSchema,
)

transaction_router = APIRouter(
    prefix="/transactions",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
        503: {"model": ErrorResponseSchema, "description": "Storage unavailable"},
    },
)

TransactionId = Annotated[UUID, Path(description="UUID of the transaction")]


def _to_schema(response) -> TransactionResponseSchema:
    return TransactionResponseSchema(**asdict(response))


@transaction_router.get(
    "",
    response_model=list[TransactionResponseSchema],
    summary="List Transactions",
    description="""
    List transactions, newest first.

    Team members only see their own submissions. `start_date` and `end_date`
    are both inclusive.
    """,
)
async def list_transactions(
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
    company_id: Annotated[Optional[UUID], Query()] = None,
    status: Annotated[Optional[TransactionStatus], Query()] = None,
    start_date: Annotated[Optional[date], Query()] = None,
    end_date: Annotated[Optional[date], Query()] = None,
) -> list[TransactionResponseSchema]:
    responses = await service.list_transactions(
        actor,
        company_id=company_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    return [_to_schema(r) for r in responses]


@transaction_router.post(
    "",
    response_model=TransactionResponseSchema,
    status_code=201,
    summary="Submit Transaction",
    description="""
    Submit an income, expense or transfer.

    Submissions from admins are approved and posted to account balances
    immediately; all others start out pending.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Referenced entity not found"},
    },
)
async def create_transaction(
    request: CreateTransactionSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionResponseSchema:
    dto = CreateTransactionRequest(
        type=request.type,
        amount=request.amount,
        currency=request.currency,
        conversion_rate=request.conversion_rate,
        company_id=request.company_id,
        category_id=request.category_id,
        client_id=request.client_id,
        from_account_id=request.from_account_id,
        to_account_id=request.to_account_id,
        description=request.description,
    )

    response = await service.create(dto, submitter=actor)

    return _to_schema(response)


@transaction_router.get(
    "/{transaction_id}",
    response_model=TransactionResponseSchema,
    summary="Get Transaction",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Not your transaction"},
        404: {"model": ErrorResponseSchema, "description": "Transaction not found"},
    },
)
async def get_transaction(
    transaction_id: TransactionId,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionResponseSchema:
    return _to_schema(await service.get(transaction_id, actor))


@transaction_router.patch(
    "/{transaction_id}",
    response_model=TransactionResponseSchema,
    summary="Update Pending Transaction",
    description="""
    Change a pending transaction. Only the fields present in the body are
    updated; the base-currency amount is recomputed when amount, currency or
    rate changes.
    """,
    responses={
        403: {"model": ErrorResponseSchema, "description": "Not your transaction"},
        404: {"model": ErrorResponseSchema, "description": "Transaction not found"},
        409: {"model": ErrorResponseSchema, "description": "Transaction is not pending"},
    },
)
async def update_transaction(
    transaction_id: TransactionId,
    request: UpdateTransactionSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionResponseSchema:
    dto = UpdateTransactionRequest(changes=request.changes())
    return _to_schema(await service.update(transaction_id, dto, actor))


@transaction_router.delete(
    "/{transaction_id}",
    status_code=204,
    summary="Delete Transaction",
    description="""
    Delete a transaction at any status. Deleting an approved transaction does
    not reverse its effect on account balances.
    """,
    responses={
        403: {"model": ErrorResponseSchema, "description": "Not your transaction"},
        404: {"model": ErrorResponseSchema, "description": "Transaction not found"},
    },
)
async def delete_transaction(
    transaction_id: TransactionId,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Response:
    await service.delete(transaction_id, actor)
    return Response(status_code=204)


@transaction_router.post(
    "/{transaction_id}/approve",
    response_model=TransactionResponseSchema,
    summary="Approve Transaction",
    description="""
    Approve a pending transaction and post it to account balances in one
    atomic step. Admin only.
    """,
    responses={
        403: {"model": ErrorResponseSchema, "description": "Admin access required"},
        404: {"model": ErrorResponseSchema, "description": "Transaction or account not found"},
        409: {"model": ErrorResponseSchema, "description": "Transaction is not pending"},
    },
)
async def approve_transaction(
    transaction_id: TransactionId,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionResponseSchema:
    return _to_schema(await service.approve(transaction_id, actor))


@transaction_router.post(
    "/{transaction_id}/reject",
    response_model=TransactionResponseSchema,
    summary="Reject Transaction",
    description="Reject a pending transaction. Balances are unaffected. Admin only.",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Admin access required"},
        404: {"model": ErrorResponseSchema, "description": "Transaction not found"},
        409: {"model": ErrorResponseSchema, "description": "Transaction is not pending"},
    },
)
async def reject_transaction(
    transaction_id: TransactionId,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionResponseSchema:
    return _to_schema(await service.reject(transaction_id, actor))
