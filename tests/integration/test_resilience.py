"""
Integration tests for resilience and error handling.

These tests verify:
1. Database failures surface as 503 STORAGE_ERROR
2. A posting that cannot complete leaves no balance or status change
3. The service keeps working after a failed unit of work
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.dependencies import get_ledger_store
from src.infrastructure.database import BankAccountModel, TransactionModel
from src.main import app
from tests.fakes import InMemoryLedgerStore
from tests.integration.helpers import ADMIN_HEADERS, MEMBER_HEADERS, account_balances, submit


# =============================================================================
# Storage Failure Tests
# =============================================================================

class TestStorageFailure:
    """Tests for handling database failures."""

    @pytest.mark.asyncio
    async def test_missing_table_returns_503(
        self,
        client: AsyncClient,
        test_engine,
    ):
        """A database error is reported as STORAGE_ERROR, not a 500."""
        async with test_engine.begin() as conn:
            await conn.run_sync(TransactionModel.__table__.drop)

        response = await client.get("/v1/transactions", headers=ADMIN_HEADERS)

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "STORAGE_ERROR"
        assert data["request_id"]


# =============================================================================
# Partial Posting Tests
# =============================================================================

class TestAtomicPosting:
    """Tests that approval and posting succeed or fail together."""

    @pytest.mark.asyncio
    async def test_missing_account_rolls_back_transfer(
        self,
        client: AsyncClient,
        test_session: AsyncSession,
        transfer_request: dict,
        seed,
    ):
        created = await submit(client, transfer_request, MEMBER_HEADERS)
        await test_session.execute(
            delete(BankAccountModel).where(BankAccountModel.id == seed.account_y)
        )
        await test_session.commit()

        response = await client.post(
            f"/v1/transactions/{created['transaction_id']}/approve",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "ACCOUNT_NOT_FOUND"

        balances = await account_balances(client)
        assert balances == {seed.account_x: "1000.00"}

        fetched = await client.get(
            f"/v1/transactions/{created['transaction_id']}",
            headers=ADMIN_HEADERS,
        )
        assert fetched.json()["status"] == "pending"

    @pytest.mark.asyncio
    async def test_service_recovers_after_failed_approval(
        self,
        client: AsyncClient,
        test_session: AsyncSession,
        transfer_request: dict,
        income_request: dict,
        seed,
    ):
        broken = await submit(client, transfer_request, MEMBER_HEADERS)
        await test_session.execute(
            delete(BankAccountModel).where(BankAccountModel.id == seed.account_y)
        )
        await test_session.commit()
        await client.post(
            f"/v1/transactions/{broken['transaction_id']}/approve",
            headers=ADMIN_HEADERS,
        )

        healthy = await submit(client, income_request, MEMBER_HEADERS)
        response = await client.post(
            f"/v1/transactions/{healthy['transaction_id']}/approve",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        balances = await account_balances(client)
        assert balances[seed.account_x] == "1250.00"


# =============================================================================
# Health Check Tests
# =============================================================================

class TestHealthCheck:
    """Tests for GET /v1/health."""

    @pytest.mark.asyncio
    async def test_healthy_when_database_reachable(self, client: AsyncClient):
        response = await client.get("/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["version"]

    @pytest.mark.asyncio
    async def test_degraded_when_store_unreachable(self, client: AsyncClient):
        store = InMemoryLedgerStore()
        store.reachable = False
        app.dependency_overrides[get_ledger_store] = lambda: store

        response = await client.get("/v1/health")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["database"] == "unavailable"
