"""Bank account API endpoints."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.services import AccountService
from src.core.dependencies import get_account_service, get_current_actor
from src.domain.entities import Actor
from src.presentation.schemas import AccountResponseSchema, ErrorResponseSchema

account_router = APIRouter(prefix="/bank-accounts")


@account_router.get(
    "",
    response_model=list[AccountResponseSchema],
    summary="List Bank Accounts",
    description="Bank accounts with their current posted balances.",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
    },
)
async def list_accounts(
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> list[AccountResponseSchema]:
    responses = await service.list_accounts()
    return [AccountResponseSchema(**asdict(r)) for r in responses]
