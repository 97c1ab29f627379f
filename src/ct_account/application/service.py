"""AccountApplicationService — thin composition layer.

Combines repository calls with schema transformations and owns the
cache-aside protocol (see domain/cache.py for keys and TTL policy).

Mutations run as a single commit; cache keys are dropped only after the
commit succeeds. Reads that have a cache key go through _read_through.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime
from typing import TypeVar

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.application.schemas import (
    AccountCreateRequest,
    AccountResponse,
    AccountSummaryView,
    AccountUpdateRequest,
    LifecycleChangeResponse,
    StatusChangeResponse,
    StatusSummary,
    StatusSummaryAdapter,
    SummaryViewAdapter,
    SummaryViewListAdapter,
    YearlyTotal,
    YearlyTotalListAdapter,
)
from src.ct_account.domain.cache import (
    AccountCacheProtocol,
    STATUS_SUMMARY_KEY,
    account_key,
    accounts_by_status_key,
    invalidation_keys,
    totals_by_year_key,
)
from src.ct_account.domain.models import Account, AccountReplacement
from src.ct_account.domain.repository import AccountRepositoryProtocol, StaleAccountError
from src.ct_account.infrastructure.persistence import AccountRepository
from src.ct_common.datetime_utils import as_utc, seconds_until_end_of_utc_day, utc_now
from src.ct_common.errors import (
    AccountAlreadyActiveError,
    AccountAlreadyInactiveError,
    AccountIdMismatchError,
    AccountNotDeletedError,
    AccountNotFoundError,
    AppError,
    ConcurrencyConflictError,
    EmptyYearListError,
    NoAccountsFoundError,
)

logger = logging.getLogger("ct.account")

T = TypeVar("T")

_NO_ACTIVE = "Nenhuma conta ativa encontrada."
_NO_INACTIVE = "Nenhuma conta inativa encontrada."
_NO_YEARLY_TOTALS = "Nenhum cliente encontrado para os anos informados."
_NO_PERIOD_MATCH = "Nenhuma conta encontrada no período informado."
_NO_DELETED = "Nenhuma conta deletada encontrada."


class AccountApplicationService:
    """Stateless per request: everything it touches is injected."""

    def __init__(
        self,
        cache: AccountCacheProtocol,
        repo: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._cache = cache
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    # ------------------------------------------------------------------
    # Cache plumbing
    # ------------------------------------------------------------------

    async def _read_through(
        self,
        key: str,
        adapter: TypeAdapter[T],
        load: Callable[[], Awaitable[T | None]],
        when_empty: Callable[[], AppError] | None = None,
    ) -> T:
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return adapter.validate_json(cached)

        logger.debug("cache miss %s", key)
        value = await load()
        if when_empty is not None and not value:
            # Nothing is cached for empty results
            raise when_empty()
        await self._cache.set(
            key, adapter.dump_json(value).decode(), seconds_until_end_of_utc_day()
        )
        return value  # type: ignore[return-value]

    async def _invalidate(self, tax_id: str) -> None:
        for key in invalidation_keys(tax_id):
            await self._cache.delete(key)
        logger.info("cache invalidated for tax_id=%s", tax_id)

    async def _commit_update(
        self,
        db: AsyncSession,
        account_id: str,
        write: Callable[[], Awaitable[Account]],
    ) -> Account:
        try:
            saved = await write()
            await db.commit()
        except StaleAccountError:
            await db.rollback()
            if not await self._repo.account_exists(db, account_id):
                raise AccountNotFoundError() from None
            logger.error("concurrent modification on account %s", account_id)
            raise ConcurrencyConflictError(account_id) from None
        except Exception:
            await db.rollback()
            raise
        return saved

    async def _require_account(self, db: AsyncSession, account_id: str) -> Account:
        account = await self._repo.get_account_by_id(db, account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def list_accounts(self, db: AsyncSession) -> list[AccountResponse]:
        accounts = await self._repo.list_accounts(db)
        return [AccountResponse.from_domain(a) for a in accounts]

    async def get_account(self, db: AsyncSession, account_id: str) -> AccountResponse:
        account = await self._require_account(db, account_id)
        return AccountResponse.from_domain(account)

    async def get_partner_view(
        self, db: AsyncSession, account_id: str
    ) -> AccountSummaryView:
        account = await self._require_account(db, account_id)
        return AccountSummaryView.from_domain(account)

    async def get_by_tax_id(self, db: AsyncSession, tax_id: str) -> AccountSummaryView:
        async def load() -> AccountSummaryView | None:
            account = await self._repo.get_account_by_tax_id(db, tax_id)
            return AccountSummaryView.from_domain(account) if account else None

        return await self._read_through(
            account_key(tax_id), SummaryViewAdapter, load, AccountNotFoundError
        )

    async def create_account(
        self, db: AsyncSession, body: AccountCreateRequest
    ) -> AccountResponse:
        account = Account(
            id=str(uuid.uuid4()),
            holder_name=body.holder_name,
            tax_id=body.tax_id,
            email=str(body.email) if body.email is not None else None,
            created_at=utc_now(),
            active=body.active,
        )
        try:
            created = await self._repo.insert_account(db, account)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("account %s created", created.id)
        await self._invalidate(created.tax_id)
        return AccountResponse.from_domain(created)

    async def update_account(
        self, db: AsyncSession, account_id: str, body: AccountUpdateRequest
    ) -> None:
        if str(body.id) != account_id:
            raise AccountIdMismatchError(account_id, str(body.id))

        replacement = AccountReplacement(
            id=account_id,
            holder_name=body.holder_name,
            tax_id=body.tax_id,
            email=str(body.email) if body.email is not None else None,
            active=body.active,
            updated_at=utc_now(),
        )
        await self._commit_update(
            db,
            account_id,
            lambda: self._repo.replace_account(db, replacement, body.version),
        )
        logger.info("account %s replaced", account_id)
        # Only the new tax id is dropped; a changed tax id leaves the old key until expiry
        await self._invalidate(replacement.tax_id)

    async def delete_account(self, db: AsyncSession, account_id: str) -> None:
        account = await self._require_account(db, account_id)
        try:
            await self._repo.delete_account(db, account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("account %s deleted", account_id)
        await self._invalidate(account.tax_id)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    async def _transition(self, db: AsyncSession, changed: Account) -> Account:
        saved = await self._commit_update(
            db, changed.id, lambda: self._repo.save_account(db, changed)
        )
        await self._invalidate(saved.tax_id)
        return saved

    async def activate(self, db: AsyncSession, account_id: str) -> StatusChangeResponse:
        account = await self._require_account(db, account_id)
        if account.active:
            raise AccountAlreadyActiveError()
        saved = await self._transition(
            db, replace(account, active=True, updated_at=utc_now())
        )
        logger.info("account %s activated", account_id)
        return StatusChangeResponse(
            message="Conta ativada com sucesso.", id=saved.id, status=saved.active
        )

    async def deactivate(self, db: AsyncSession, account_id: str) -> StatusChangeResponse:
        account = await self._require_account(db, account_id)
        if not account.active:
            raise AccountAlreadyInactiveError()
        saved = await self._transition(
            db, replace(account, active=False, updated_at=utc_now())
        )
        logger.info("account %s deactivated", account_id)
        return StatusChangeResponse(
            message="Conta inativada com sucesso.", id=saved.id, status=saved.active
        )

    async def soft_delete(
        self, db: AsyncSession, account_id: str
    ) -> LifecycleChangeResponse:
        account = await self._require_account(db, account_id)
        now = utc_now()
        # No guard: a second soft delete re-stamps deleted_at
        saved = await self._transition(
            db, replace(account, deleted_at=now, updated_at=now)
        )
        logger.info("account %s soft-deleted", account_id)
        return LifecycleChangeResponse(message="Conta marcada como deletada.", id=saved.id)

    async def restore(self, db: AsyncSession, account_id: str) -> LifecycleChangeResponse:
        account = await self._require_account(db, account_id)
        if not account.is_deleted:
            raise AccountNotDeletedError()
        saved = await self._transition(
            db, replace(account, deleted_at=None, updated_at=utc_now())
        )
        logger.info("account %s restored", account_id)
        return LifecycleChangeResponse(message="Conta restaurada com sucesso.", id=saved.id)

    # ------------------------------------------------------------------
    # Queries and aggregates
    # ------------------------------------------------------------------

    async def list_by_status(
        self, db: AsyncSession, active: bool
    ) -> list[AccountSummaryView]:
        async def load() -> list[AccountSummaryView]:
            accounts = await self._repo.list_by_status(db, active)
            return [AccountSummaryView.from_domain(a) for a in accounts]

        message = _NO_ACTIVE if active else _NO_INACTIVE
        return await self._read_through(
            accounts_by_status_key(active),
            SummaryViewListAdapter,
            load,
            lambda: NoAccountsFoundError(message),
        )

    async def totals_by_year(
        self, db: AsyncSession, years: list[int]
    ) -> list[YearlyTotal]:
        if not years:
            raise EmptyYearListError()
        distinct_years = sorted(set(years))

        async def load() -> list[YearlyTotal]:
            totals = await self._repo.count_by_year(db, distinct_years)
            return [YearlyTotal.from_domain(t) for t in sorted(totals, key=lambda t: t.year)]

        return await self._read_through(
            totals_by_year_key(distinct_years),
            YearlyTotalListAdapter,
            load,
            lambda: NoAccountsFoundError(_NO_YEARLY_TOTALS),
        )

    async def status_summary(self, db: AsyncSession) -> StatusSummary:
        async def load() -> StatusSummary:
            counts = await self._repo.count_by_status(db)
            return StatusSummary.from_domain(counts)

        return await self._read_through(STATUS_SUMMARY_KEY, StatusSummaryAdapter, load)

    async def list_created_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[AccountSummaryView]:
        accounts = await self._repo.list_created_between(
            db, as_utc(start), as_utc(end)
        )
        if not accounts:
            raise NoAccountsFoundError(_NO_PERIOD_MATCH)
        return [AccountSummaryView.from_domain(a) for a in accounts]

    async def list_deleted(self, db: AsyncSession) -> list[AccountSummaryView]:
        accounts = await self._repo.list_deleted(db)
        if not accounts:
            raise NoAccountsFoundError(_NO_DELETED)
        return [AccountSummaryView.from_domain(a) for a in accounts]
