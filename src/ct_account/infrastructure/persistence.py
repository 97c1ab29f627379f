"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Updates are version-checked: `WHERE id = :id AND version = :expected_version`.
A result of 0 rows raises StaleAccountError; the caller decides whether that
means "deleted meanwhile" or a real conflict.

Transaction ownership: the application service commits or rolls back.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import (
    Account,
    AccountReplacement,
    StatusCounts,
    YearCount,
)
from src.ct_account.domain.repository import StaleAccountError
from src.ct_common.errors import InternalError

_COLUMNS = """
    id, holder_name, tax_id, email, active,
    created_at, updated_at, deleted_at, version
"""

# ---------------------------------------------------------------------------
# SQL: reads
# ---------------------------------------------------------------------------

_LIST_ALL_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    ORDER BY created_at, id
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE id = :account_id
""")

# tax_id is not unique; the oldest row wins
_GET_BY_TAX_ID_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE tax_id = :tax_id
    ORDER BY created_at, id
    LIMIT 1
""")

_EXISTS_SQL = text("""
    SELECT EXISTS (SELECT 1 FROM accounts WHERE id = :account_id) AS found
""")

_LIST_BY_STATUS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE active = :active
    ORDER BY created_at, id
""")

_LIST_CREATED_BETWEEN_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE created_at >= :start AND created_at <= :end
    ORDER BY created_at, id
""")

_LIST_DELETED_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE deleted_at IS NOT NULL
    ORDER BY deleted_at, id
""")

_COUNT_BY_YEAR_SQL = text("""
    SELECT CAST(EXTRACT(YEAR FROM created_at AT TIME ZONE 'UTC') AS INTEGER) AS year,
           COUNT(*) AS total
    FROM accounts
    WHERE CAST(EXTRACT(YEAR FROM created_at AT TIME ZONE 'UTC') AS INTEGER)
          = ANY(CAST(:years AS INTEGER[]))
    GROUP BY 1
    ORDER BY 1
""")

_COUNT_BY_STATUS_SQL = text("""
    SELECT COUNT(*) FILTER (WHERE active)     AS active_count,
           COUNT(*) FILTER (WHERE NOT active) AS inactive_count
    FROM accounts
""")

# ---------------------------------------------------------------------------
# SQL: mutations
# ---------------------------------------------------------------------------

_INSERT_SQL = text(f"""
    INSERT INTO accounts
        (id, holder_name, tax_id, email, active,
         created_at, updated_at, deleted_at, version)
    VALUES
        (:id, :holder_name, :tax_id, :email, :active,
         :created_at, NULL, NULL, 0)
    RETURNING {_COLUMNS}
""")

# Full replace from the PUT body: created_at and deleted_at are not client-owned
_REPLACE_SQL = text(f"""
    UPDATE accounts
    SET holder_name = :holder_name,
        tax_id      = :tax_id,
        email       = :email,
        active      = :active,
        updated_at  = :updated_at,
        version     = version + 1
    WHERE id = :id
      AND (CAST(:expected_version AS BIGINT) IS NULL
           OR version = CAST(:expected_version AS BIGINT))
    RETURNING {_COLUMNS}
""")

# Status transitions: the loaded entity is written back, guarded by its version
_SAVE_SQL = text(f"""
    UPDATE accounts
    SET holder_name = :holder_name,
        tax_id      = :tax_id,
        email       = :email,
        active      = :active,
        updated_at  = :updated_at,
        deleted_at  = :deleted_at,
        version     = version + 1
    WHERE id = :id AND version = :expected_version
    RETURNING {_COLUMNS}
""")

_DELETE_SQL = text("""
    DELETE FROM accounts WHERE id = :account_id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        holder_name=row.holder_name,  # type: ignore[attr-defined]
        tax_id=row.tax_id,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        active=row.active,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        deleted_at=row.deleted_at,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
    )


def _mutable_params(account: Account | AccountReplacement) -> dict[str, object]:
    return {
        "id": account.id,
        "holder_name": account.holder_name,
        "tax_id": account.tax_id,
        "email": account.email,
        "active": account.active,
        "updated_at": account.updated_at,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class AccountRepository:
    """Concrete repository over the `accounts` table."""

    async def list_accounts(self, db: AsyncSession) -> list[Account]:
        result = await db.execute(_LIST_ALL_SQL)
        return [_row_to_account(row) for row in result.fetchall()]

    async def get_account_by_id(
        self, db: AsyncSession, account_id: str
    ) -> Account | None:
        result = await db.execute(_GET_BY_ID_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def get_account_by_tax_id(
        self, db: AsyncSession, tax_id: str
    ) -> Account | None:
        result = await db.execute(_GET_BY_TAX_ID_SQL, {"tax_id": tax_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def account_exists(self, db: AsyncSession, account_id: str) -> bool:
        result = await db.execute(_EXISTS_SQL, {"account_id": account_id})
        return bool(result.scalar())

    async def insert_account(self, db: AsyncSession, account: Account) -> Account:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": account.id,
                "holder_name": account.holder_name,
                "tax_id": account.tax_id,
                "email": account.email,
                "active": account.active,
                "created_at": account.created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Insert of account {account.id} returned no rows")
        return _row_to_account(row)

    async def replace_account(
        self,
        db: AsyncSession,
        replacement: AccountReplacement,
        expected_version: int | None,
    ) -> Account:
        params = _mutable_params(replacement)
        params["expected_version"] = expected_version
        result = await db.execute(_REPLACE_SQL, params)
        row = result.fetchone()
        if row is None:
            raise StaleAccountError(replacement.id)
        return _row_to_account(row)

    async def save_account(self, db: AsyncSession, account: Account) -> Account:
        params = _mutable_params(account)
        params["deleted_at"] = account.deleted_at
        params["expected_version"] = account.version
        result = await db.execute(_SAVE_SQL, params)
        row = result.fetchone()
        if row is None:
            raise StaleAccountError(account.id)
        return _row_to_account(row)

    async def delete_account(self, db: AsyncSession, account_id: str) -> None:
        await db.execute(_DELETE_SQL, {"account_id": account_id})

    async def list_by_status(self, db: AsyncSession, active: bool) -> list[Account]:
        result = await db.execute(_LIST_BY_STATUS_SQL, {"active": active})
        return [_row_to_account(row) for row in result.fetchall()]

    async def list_created_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[Account]:
        result = await db.execute(
            _LIST_CREATED_BETWEEN_SQL, {"start": start, "end": end}
        )
        return [_row_to_account(row) for row in result.fetchall()]

    async def list_deleted(self, db: AsyncSession) -> list[Account]:
        result = await db.execute(_LIST_DELETED_SQL)
        return [_row_to_account(row) for row in result.fetchall()]

    async def count_by_year(self, db: AsyncSession, years: list[int]) -> list[YearCount]:
        result = await db.execute(_COUNT_BY_YEAR_SQL, {"years": list(years)})
        return [YearCount(year=row.year, count=row.total) for row in result.fetchall()]

    async def count_by_status(self, db: AsyncSession) -> StatusCounts:
        result = await db.execute(_COUNT_BY_STATUS_SQL)
        row = result.fetchone()
        if row is None:
            return StatusCounts(active=0, inactive=0)
        return StatusCounts(active=row.active_count, inactive=row.inactive_count)
