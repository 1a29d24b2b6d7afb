"""Caller identities and small request helpers for API tests."""

from httpx import AsyncClient

ADMIN_HEADERS = {"X-Actor-Id": "admin-1", "X-Actor-Role": "admin"}
MEMBER_HEADERS = {"X-Actor-Id": "member-1", "X-Actor-Role": "team"}
OTHER_MEMBER_HEADERS = {"X-Actor-Id": "member-2", "X-Actor-Role": "team"}


async def account_balances(client: AsyncClient) -> dict:
    """Map account id to current balance string."""
    response = await client.get("/v1/bank-accounts", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    return {a["account_id"]: a["current_balance"] for a in response.json()}


async def submit(client: AsyncClient, body: dict, headers: dict) -> dict:
    """Create a transaction and return the response body."""
    response = await client.post("/v1/transactions", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
