"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import (
    Account,
    AccountReplacement,
    StatusCounts,
    YearCount,
)


class StaleAccountError(Exception):
    """A version-checked update matched no row.

    Either the account was deleted or another writer bumped its version.
    """

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"Stale or missing account: {account_id}")


class AccountRepositoryProtocol(Protocol):
    async def list_accounts(self, db: AsyncSession) -> list[Account]: ...

    async def get_account_by_id(
        self, db: AsyncSession, account_id: str
    ) -> Account | None: ...

    async def get_account_by_tax_id(
        self, db: AsyncSession, tax_id: str
    ) -> Account | None: ...

    async def account_exists(self, db: AsyncSession, account_id: str) -> bool: ...

    async def insert_account(self, db: AsyncSession, account: Account) -> Account: ...

    async def replace_account(
        self,
        db: AsyncSession,
        replacement: AccountReplacement,
        expected_version: int | None,
    ) -> Account: ...

    async def save_account(self, db: AsyncSession, account: Account) -> Account: ...

    async def delete_account(self, db: AsyncSession, account_id: str) -> None: ...

    async def list_by_status(
        self, db: AsyncSession, active: bool
    ) -> list[Account]: ...

    async def list_created_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[Account]: ...

    async def list_deleted(self, db: AsyncSession) -> list[Account]: ...

    async def count_by_year(
        self, db: AsyncSession, years: list[int]
    ) -> list[YearCount]: ...

    async def count_by_status(self, db: AsyncSession) -> StatusCounts: ...
