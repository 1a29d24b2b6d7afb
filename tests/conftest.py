"""
Shared fixtures.

Provides:
- In-memory LedgerStore with all-or-nothing atomic scopes
- A seeded company
- Admin and team-member actors
"""

import pytest

from src.domain.entities import Actor, Reference, Role
from tests.fakes import InMemoryLedgerStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def company(store: InMemoryLedgerStore) -> Reference:
    return store.add_company("Acme Consulting")


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", role=Role.ADMIN)


@pytest.fixture
def member() -> Actor:
    return Actor(id="member-1", role=Role.TEAM)


@pytest.fixture
def other_member() -> Actor:
    return Actor(id="member-2", role=Role.TEAM)
