"""Domain models for ct_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"


def status_label(active: bool) -> str:
    return STATUS_ACTIVE if active else STATUS_INACTIVE


@dataclass
class Account:
    id: str                          # UUID string
    holder_name: str
    tax_id: str                      # CPF, 11 chars, not unique
    email: str | None
    created_at: datetime
    active: bool = False
    updated_at: datetime | None = None
    deleted_at: datetime | None = None   # set → soft-deleted
    version: int = 0                 # optimistic concurrency token

    @property
    def status_label(self) -> str:
        return status_label(self.active)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class YearCount:
    year: int
    count: int


@dataclass
class StatusCounts:
    active: int
    inactive: int

    @property
    def total(self) -> int:
        return self.active + self.inactive


@dataclass
class AccountReplacement:
    """Client-owned fields of a full replace (PUT)."""

    id: str
    holder_name: str
    tax_id: str
    email: str | None
    active: bool
    updated_at: datetime
