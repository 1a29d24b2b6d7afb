"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database with the ledger schema
- Seeded companies, categories, clients and bank accounts
- Test client for the FastAPI app bound to the test database
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.dependencies import get_ledger_store
from src.infrastructure.database import (
    Base,
    BankAccountModel,
    CategoryModel,
    ClientModel,
    CompanyModel,
)
from src.infrastructure.repositories import PostgresLedgerStore


@dataclass(frozen=True)
class SeedData:
    """IDs of the reference rows and accounts created for each test."""

    company_id: str
    other_company_id: str
    category_id: str
    client_id: str
    account_x: str
    account_y: str


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def seed(test_session: AsyncSession) -> SeedData:
    """
    Insert reference data and two accounts.

    Account X starts at 1000.00 and account Y at 500.00.
    """
    company = CompanyModel(name="Acme Consulting")
    other_company = CompanyModel(name="Globex")
    category = CategoryModel(name="Software")
    client = ClientModel(name="Wayne Enterprises")
    account_x = BankAccountModel(
        name="Operating",
        owner_id="admin-1",
        initial_balance=Decimal("1000.00"),
        current_balance=Decimal("1000.00"),
    )
    account_y = BankAccountModel(
        name="Reserve",
        owner_id="admin-1",
        initial_balance=Decimal("500.00"),
        current_balance=Decimal("500.00"),
    )

    test_session.add_all([company, other_company, category, client, account_x, account_y])
    await test_session.commit()

    return SeedData(
        company_id=company.id,
        other_company_id=other_company.id,
        category_id=category.id,
        client_id=client.id,
        account_x=account_x.id,
        account_y=account_y.id,
    )


@pytest.fixture
def ledger_store(test_session: AsyncSession) -> PostgresLedgerStore:
    return PostgresLedgerStore(test_session)


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    seed: SeedData,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the in-memory database.

    Every request shares the test session, so requests must be awaited
    one at a time.
    """
    async def override_get_ledger_store():
        return PostgresLedgerStore(test_session)

    app.dependency_overrides[get_ledger_store] = override_get_ledger_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def income_request(seed: SeedData) -> dict:
    """Income of 250.00 INR into account X."""
    return {
        "type": "income",
        "amount": "250.00",
        "company_id": seed.company_id,
        "category_id": seed.category_id,
        "client_id": seed.client_id,
        "from_account_id": seed.account_x,
        "description": "Retainer, March",
    }


@pytest.fixture
def usd_income_request(seed: SeedData) -> dict:
    """Income of 100 USD at 83.50 into account X."""
    return {
        "type": "income",
        "amount": "100",
        "currency": "USD",
        "conversion_rate": "83.50",
        "company_id": seed.company_id,
        "from_account_id": seed.account_x,
    }


@pytest.fixture
def transfer_request(seed: SeedData) -> dict:
    """Transfer of 300.00 from account X to account Y."""
    return {
        "type": "transfer",
        "amount": "300.00",
        "company_id": seed.company_id,
        "from_account_id": seed.account_x,
        "to_account_id": seed.account_y,
    }

