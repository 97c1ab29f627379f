"""Shared test fixtures.

InMemoryAccountRepository and InMemoryAccountCache stand in for PostgreSQL
and Redis. `client` drives the real FastAPI app with both swapped in through
dependency overrides, so no external service is needed.
"""

from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.ct_account.api.dependencies import get_account_service
from src.ct_account.application.service import AccountApplicationService
from src.ct_account.domain.models import (
    Account,
    AccountReplacement,
    StatusCounts,
    YearCount,
)
from src.ct_account.domain.repository import StaleAccountError
from src.ct_common.database import get_db_session
from src.main import app


def make_account(**kwargs) -> Account:
    defaults = dict(
        id="00000000-0000-0000-0000-000000000001",
        holder_name="Cliente Teste",
        tax_id="12345678900",
        email="cliente@teste.com",
        created_at=datetime(2024, 1, 15, 12, 0, tzinfo=UTC),
        active=False,
        updated_at=None,
        deleted_at=None,
        version=0,
    )
    defaults.update(kwargs)
    return Account(**defaults)


class InMemoryAccountRepository:
    """Dict-backed AccountRepositoryProtocol; writes apply immediately."""

    def __init__(self, accounts: list[Account] | None = None) -> None:
        self.accounts: dict[str, Account] = {a.id: a for a in accounts or []}

    def _ordered(self) -> list[Account]:
        return sorted(self.accounts.values(), key=lambda a: (a.created_at, a.id))

    async def list_accounts(self, db) -> list[Account]:
        return self._ordered()

    async def get_account_by_id(self, db, account_id: str) -> Account | None:
        return self.accounts.get(account_id)

    async def get_account_by_tax_id(self, db, tax_id: str) -> Account | None:
        return next((a for a in self._ordered() if a.tax_id == tax_id), None)

    async def account_exists(self, db, account_id: str) -> bool:
        return account_id in self.accounts

    async def insert_account(self, db, account: Account) -> Account:
        stored = replace(account, updated_at=None, deleted_at=None, version=0)
        self.accounts[stored.id] = stored
        return stored

    async def replace_account(
        self, db, replacement: AccountReplacement, expected_version: int | None
    ) -> Account:
        current = self.accounts.get(replacement.id)
        if current is None or (
            expected_version is not None and current.version != expected_version
        ):
            raise StaleAccountError(replacement.id)
        stored = replace(
            current,
            holder_name=replacement.holder_name,
            tax_id=replacement.tax_id,
            email=replacement.email,
            active=replacement.active,
            updated_at=replacement.updated_at,
            version=current.version + 1,
        )
        self.accounts[stored.id] = stored
        return stored

    async def save_account(self, db, account: Account) -> Account:
        current = self.accounts.get(account.id)
        if current is None or current.version != account.version:
            raise StaleAccountError(account.id)
        stored = replace(account, version=current.version + 1)
        self.accounts[stored.id] = stored
        return stored

    async def delete_account(self, db, account_id: str) -> None:
        self.accounts.pop(account_id, None)

    async def list_by_status(self, db, active: bool) -> list[Account]:
        return [a for a in self._ordered() if a.active == active]

    async def list_created_between(self, db, start: datetime, end: datetime) -> list[Account]:
        return [a for a in self._ordered() if start <= a.created_at <= end]

    async def list_deleted(self, db) -> list[Account]:
        deleted = [a for a in self.accounts.values() if a.deleted_at is not None]
        return sorted(deleted, key=lambda a: (a.deleted_at, a.id))

    async def count_by_year(self, db, years: list[int]) -> list[YearCount]:
        counts: dict[int, int] = {}
        for a in self.accounts.values():
            if a.created_at.year in years:
                counts[a.created_at.year] = counts.get(a.created_at.year, 0) + 1
        return [YearCount(year=y, count=c) for y, c in sorted(counts.items())]

    async def count_by_status(self, db) -> StatusCounts:
        active = sum(1 for a in self.accounts.values() if a.active)
        return StatusCounts(active=active, inactive=len(self.accounts) - active)


class InMemoryAccountCache:
    """AccountCacheProtocol that records TTLs and deletions."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.deleted: list[str] = []

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.values[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self.deleted.append(key)
        self.values.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture
def repo() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def cache() -> InMemoryAccountCache:
    return InMemoryAccountCache()


@pytest.fixture
def db():
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
async def client(repo, cache, db) -> AsyncClient:
    """Async HTTP client against the app, wired to the in-memory fakes."""
    app.dependency_overrides[get_account_service] = lambda: AccountApplicationService(
        cache=cache, repo=repo
    )
    app.dependency_overrides[get_db_session] = lambda: db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def account_factory():
    return make_account
