"""
Integration tests for the transaction lifecycle API.

These tests verify:
1. POST /v1/transactions - submission, conversion and validation errors
2. POST /v1/transactions/{id}/approve|reject - state machine and posting
3. PATCH /v1/transactions/{id} - edits to pending transactions only
4. DELETE /v1/transactions/{id} - deletion never reverses a posting
5. Caller identity and role checks
"""

import pytest
from httpx import AsyncClient
from uuid import uuid4

from tests.integration.helpers import (
    ADMIN_HEADERS,
    MEMBER_HEADERS,
    OTHER_MEMBER_HEADERS,
    account_balances,
    submit,
)


# =============================================================================
# Submission Tests
# =============================================================================

class TestCreateTransaction:
    """Tests for POST /v1/transactions."""

    @pytest.mark.asyncio
    async def test_team_submission_is_pending(
        self,
        client: AsyncClient,
        income_request: dict,
        seed,
    ):
        response = await client.post("/v1/transactions", json=income_request, headers=MEMBER_HEADERS)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["owner_id"] == "member-1"
        assert data["amount"] == "250.00"
        assert data["converted_base_amount"] == "250.00"
        assert data["description"] == "Retainer, March"

        balances = await account_balances(client)
        assert balances[seed.account_x] == "1000.00"

    @pytest.mark.asyncio
    async def test_usd_submission_is_converted(
        self,
        client: AsyncClient,
        usd_income_request: dict,
    ):
        """100 USD at 83.50 is stored as 8350.00 INR."""
        data = await submit(client, usd_income_request, MEMBER_HEADERS)

        assert data["currency"] == "USD"
        assert data["amount"] == "100.00"
        assert data["converted_base_amount"] == "8350.00"

    @pytest.mark.asyncio
    async def test_admin_submission_is_approved_and_posted(
        self,
        client: AsyncClient,
        seed,
    ):
        body = {
            "type": "expense",
            "amount": "120.50",
            "company_id": seed.company_id,
            "from_account_id": seed.account_x,
        }

        data = await submit(client, body, ADMIN_HEADERS)

        assert data["status"] == "approved"
        balances = await account_balances(client)
        assert balances[seed.account_x] == "879.50"

    @pytest.mark.asyncio
    async def test_usd_without_rate_is_rejected(
        self,
        client: AsyncClient,
        usd_income_request: dict,
    ):
        del usd_income_request["conversion_rate"]

        response = await client.post(
            "/v1/transactions", json=usd_income_request, headers=MEMBER_HEADERS
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert [d["field"] for d in data["details"]] == ["conversion_rate"]
        assert data["request_id"]

    @pytest.mark.asyncio
    async def test_transfer_without_destination_is_rejected(
        self,
        client: AsyncClient,
        transfer_request: dict,
    ):
        del transfer_request["to_account_id"]

        response = await client.post(
            "/v1/transactions", json=transfer_request, headers=MEMBER_HEADERS
        )

        assert response.status_code == 400
        assert "to_account_id" in {d["field"] for d in response.json()["details"]}

    @pytest.mark.asyncio
    async def test_malformed_amount_is_rejected(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        income_request["amount"] = "lots"

        response = await client.post("/v1/transactions", json=income_request, headers=MEMBER_HEADERS)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "amount"

    @pytest.mark.asyncio
    async def test_unknown_company_is_404(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        income_request["company_id"] = str(uuid4())

        response = await client.post("/v1/transactions", json=income_request, headers=MEMBER_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "COMPANY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_account_is_404(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        income_request["from_account_id"] = str(uuid4())

        response = await client.post("/v1/transactions", json=income_request, headers=MEMBER_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "ACCOUNT_NOT_FOUND"


# =============================================================================
# Caller Identity Tests
# =============================================================================

class TestCallerIdentity:
    """Tests for the X-Actor-Id / X-Actor-Role headers."""

    @pytest.mark.asyncio
    async def test_missing_headers_is_401(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        response = await client.post("/v1/transactions", json=income_request)

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_unknown_role_is_401(self, client: AsyncClient):
        response = await client.get(
            "/v1/transactions",
            headers={"X-Actor-Id": "someone", "X-Actor-Role": "superuser"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get(
            "/v1/transactions",
            headers={**MEMBER_HEADERS, "X-Request-ID": "req-123"},
        )

        assert response.headers["X-Request-ID"] == "req-123"


# =============================================================================
# Approval Tests
# =============================================================================

class TestApproveReject:
    """Tests for POST /v1/transactions/{id}/approve and /reject."""

    @pytest.mark.asyncio
    async def test_approve_posts_income(
        self,
        client: AsyncClient,
        income_request: dict,
        seed,
    ):
        """Income 250 on 1000 leaves the account at 1250."""
        created = await submit(client, income_request, MEMBER_HEADERS)

        response = await client.post(
            f"/v1/transactions/{created['transaction_id']}/approve",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        balances = await account_balances(client)
        assert balances[seed.account_x] == "1250.00"

    @pytest.mark.asyncio
    async def test_approve_transfer_conserves_money(
        self,
        client: AsyncClient,
        transfer_request: dict,
        seed,
    ):
        """Transfer 300 from X=1000 to Y=500 leaves X=700 and Y=800."""
        created = await submit(client, transfer_request, MEMBER_HEADERS)

        response = await client.post(
            f"/v1/transactions/{created['transaction_id']}/approve",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        balances = await account_balances(client)
        assert balances[seed.account_x] == "700.00"
        assert balances[seed.account_y] == "800.00"

    @pytest.mark.asyncio
    async def test_second_approve_is_409_and_posts_once(
        self,
        client: AsyncClient,
        income_request: dict,
        seed,
    ):
        created = await submit(client, income_request, MEMBER_HEADERS)
        url = f"/v1/transactions/{created['transaction_id']}/approve"

        first = await client.post(url, headers=ADMIN_HEADERS)
        second = await client.post(url, headers=ADMIN_HEADERS)

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error"] == "INVALID_STATE"
        balances = await account_balances(client)
        assert balances[seed.account_x] == "1250.00"

    @pytest.mark.asyncio
    async def test_team_member_cannot_approve(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        created = await submit(client, income_request, MEMBER_HEADERS)

        response = await client.post(
            f"/v1/transactions/{created['transaction_id']}/approve",
            headers=MEMBER_HEADERS,
        )

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_reject_then_approve_is_409(
        self,
        client: AsyncClient,
        income_request: dict,
        seed,
    ):
        created = await submit(client, income_request, MEMBER_HEADERS)
        txn_url = f"/v1/transactions/{created['transaction_id']}"

        rejected = await client.post(f"{txn_url}/reject", headers=ADMIN_HEADERS)
        approved = await client.post(f"{txn_url}/approve", headers=ADMIN_HEADERS)

        assert rejected.status_code == 200
        assert rejected.json()["status"] == "rejected"
        assert approved.status_code == 409
        balances = await account_balances(client)
        assert balances[seed.account_x] == "1000.00"

    @pytest.mark.asyncio
    async def test_approve_unknown_transaction_is_404(self, client: AsyncClient):
        response = await client.post(f"/v1/transactions/{uuid4()}/approve", headers=ADMIN_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "TRANSACTION_NOT_FOUND"


# =============================================================================
# Update / Delete Tests
# =============================================================================

class TestUpdateDelete:
    """Tests for PATCH and DELETE /v1/transactions/{id}."""

    @pytest.mark.asyncio
    async def test_patch_recomputes_converted_amount(
        self,
        client: AsyncClient,
        usd_income_request: dict,
    ):
        created = await submit(client, usd_income_request, MEMBER_HEADERS)

        response = await client.patch(
            f"/v1/transactions/{created['transaction_id']}",
            json={"amount": "200"},
            headers=MEMBER_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["converted_base_amount"] == "16700.00"

    @pytest.mark.asyncio
    async def test_patch_approved_is_409(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        created = await submit(client, income_request, ADMIN_HEADERS)

        response = await client.patch(
            f"/v1/transactions/{created['transaction_id']}",
            json={"amount": "1.00"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_patch_null_type_is_400(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        created = await submit(client, income_request, MEMBER_HEADERS)

        response = await client.patch(
            f"/v1/transactions/{created['transaction_id']}",
            json={"type": None},
            headers=MEMBER_HEADERS,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_member_cannot_patch(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        created = await submit(client, income_request, MEMBER_HEADERS)

        response = await client.patch(
            f"/v1/transactions/{created['transaction_id']}",
            json={"description": "hijack"},
            headers=OTHER_MEMBER_HEADERS,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_approved_keeps_balance(
        self,
        client: AsyncClient,
        income_request: dict,
        seed,
    ):
        created = await submit(client, income_request, ADMIN_HEADERS)
        txn_url = f"/v1/transactions/{created['transaction_id']}"

        deleted = await client.delete(txn_url, headers=ADMIN_HEADERS)
        fetched = await client.get(txn_url, headers=ADMIN_HEADERS)

        assert deleted.status_code == 204
        assert fetched.status_code == 404
        balances = await account_balances(client)
        assert balances[seed.account_x] == "1250.00"


# =============================================================================
# Read Tests
# =============================================================================

class TestReadTransactions:
    """Tests for GET /v1/transactions and /v1/transactions/{id}."""

    @pytest.mark.asyncio
    async def test_team_members_see_only_their_own(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        await submit(client, income_request, MEMBER_HEADERS)
        await submit(client, income_request, OTHER_MEMBER_HEADERS)

        mine = await client.get("/v1/transactions", headers=MEMBER_HEADERS)
        everything = await client.get("/v1/transactions", headers=ADMIN_HEADERS)

        assert {t["owner_id"] for t in mine.json()} == {"member-1"}
        assert len(everything.json()) == 2

    @pytest.mark.asyncio
    async def test_get_other_members_transaction_is_403(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        created = await submit(client, income_request, MEMBER_HEADERS)

        response = await client.get(
            f"/v1/transactions/{created['transaction_id']}",
            headers=OTHER_MEMBER_HEADERS,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_list_filters_by_status(
        self,
        client: AsyncClient,
        income_request: dict,
    ):
        await submit(client, income_request, MEMBER_HEADERS)
        approved = await submit(client, income_request, ADMIN_HEADERS)

        response = await client.get(
            "/v1/transactions",
            params={"status": "approved"},
            headers=ADMIN_HEADERS,
        )

        assert [t["transaction_id"] for t in response.json()] == [approved["transaction_id"]]

    @pytest.mark.asyncio
    async def test_list_rejects_inverted_date_range(self, client: AsyncClient):
        response = await client.get(
            "/v1/transactions",
            params={"start_date": "2026-02-01", "end_date": "2026-01-01"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
