"""Account read cache — key policy and store Protocol.

Cache-aside:
  - Read: check cache → DB on miss → populate cache with TTL
  - Write: DB first (commit), then delete the affected keys
  - TTL: until 23:59:59 UTC of the current day
  - Empty results are never cached

Keys:
  account:<tax_id>                  single summary view
  accounts:active / accounts:inactive
  status:summary
  totals:by_year:<y1,y2,...>        years sorted ascending

Writes never touch totals:by_year:*; those entries go stale until expiry.
"""

from collections.abc import Iterable
from typing import Protocol

STATUS_SUMMARY_KEY = "status:summary"
ACTIVE_ACCOUNTS_KEY = "accounts:active"
INACTIVE_ACCOUNTS_KEY = "accounts:inactive"


def account_key(tax_id: str) -> str:
    return f"account:{tax_id}"


def accounts_by_status_key(active: bool) -> str:
    return ACTIVE_ACCOUNTS_KEY if active else INACTIVE_ACCOUNTS_KEY


def totals_by_year_key(years: Iterable[int]) -> str:
    """Order-insensitive: [2025, 2024] and [2024, 2025] share one entry."""
    return "totals:by_year:" + ",".join(str(y) for y in sorted(set(years)))


def invalidation_keys(tax_id: str) -> list[str]:
    """Keys dropped by every account mutation."""
    return [
        account_key(tax_id),
        STATUS_SUMMARY_KEY,
        ACTIVE_ACCOUNTS_KEY,
        INACTIVE_ACCOUNTS_KEY,
    ]


class AccountCacheProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...
