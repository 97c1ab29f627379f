"""Pydantic schemas for the ct_account API.

Read-side DTOs (AccountSummaryView, YearlyTotal, StatusSummary) double as
the cache payload format: they are stored with model_dump_json() and read
back with the TypeAdapters below.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, TypeAdapter

from src.ct_account.domain.models import Account, StatusCounts, YearCount

TAX_ID_LENGTH = 11

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AccountCreateRequest(BaseModel):
    holder_name: str = Field(..., min_length=1, max_length=200)
    tax_id: str = Field(..., min_length=TAX_ID_LENGTH, max_length=TAX_ID_LENGTH)
    email: EmailStr | None = None
    active: bool = False


class AccountUpdateRequest(BaseModel):
    """Full replace. `version` is optional; when sent, the update is rejected
    if another writer got there first."""

    id: UUID
    holder_name: str = Field(..., min_length=1, max_length=200)
    tax_id: str = Field(..., min_length=TAX_ID_LENGTH, max_length=TAX_ID_LENGTH)
    email: EmailStr | None = None
    active: bool = False
    version: int | None = Field(None, ge=0)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    id: str
    holder_name: str
    tax_id: str
    email: str | None
    created_at: datetime
    updated_at: datetime | None
    active: bool
    deleted_at: datetime | None
    version: int

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            holder_name=account.holder_name,
            tax_id=account.tax_id,
            email=account.email,
            created_at=account.created_at,
            updated_at=account.updated_at,
            active=account.active,
            deleted_at=account.deleted_at,
            version=account.version,
        )


class AccountSummaryView(BaseModel):
    """Reduced view handed to partner systems and list endpoints."""

    id: str
    name: str
    tax_id: str
    status_label: str

    @classmethod
    def from_domain(cls, account: Account) -> "AccountSummaryView":
        return cls(
            id=account.id,
            name=account.holder_name,
            tax_id=account.tax_id,
            status_label=account.status_label,
        )


class YearlyTotal(BaseModel):
    year: int
    count: int

    @classmethod
    def from_domain(cls, total: YearCount) -> "YearlyTotal":
        return cls(year=total.year, count=total.count)


class StatusSummary(BaseModel):
    active_count: int
    inactive_count: int
    total_count: int

    @classmethod
    def from_domain(cls, counts: StatusCounts) -> "StatusSummary":
        return cls(
            active_count=counts.active,
            inactive_count=counts.inactive,
            total_count=counts.total,
        )


class StatusChangeResponse(BaseModel):
    message: str
    id: str
    status: bool


class LifecycleChangeResponse(BaseModel):
    message: str
    id: str


# ---------------------------------------------------------------------------
# Cache payload adapters
# ---------------------------------------------------------------------------

SummaryViewAdapter = TypeAdapter(AccountSummaryView)
SummaryViewListAdapter = TypeAdapter(list[AccountSummaryView])
YearlyTotalListAdapter = TypeAdapter(list[YearlyTotal])
StatusSummaryAdapter = TypeAdapter(StatusSummary)
