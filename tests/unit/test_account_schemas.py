"""Tests for ct_account Pydantic schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.ct_account.application.schemas import (
    AccountCreateRequest,
    AccountResponse,
    AccountSummaryView,
    AccountUpdateRequest,
    StatusSummary,
    SummaryViewListAdapter,
)
from src.ct_account.domain.models import Account, StatusCounts


def _account(active: bool) -> Account:
    return Account(
        id="a1",
        holder_name="Ativa1",
        tax_id="11111111111",
        email=None,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        active=active,
    )


class TestAccountCreateRequest:
    def test_valid_minimal(self) -> None:
        req = AccountCreateRequest(holder_name="Cliente X", tax_id="99988877700")
        assert req.active is False
        assert req.email is None

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AccountCreateRequest(holder_name="", tax_id="99988877700")

    def test_missing_tax_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AccountCreateRequest(holder_name="Cliente X")

    @pytest.mark.parametrize("tax_id", ["123", "123456789012"])
    def test_tax_id_must_have_eleven_chars(self, tax_id: str) -> None:
        with pytest.raises(ValidationError):
            AccountCreateRequest(holder_name="Cliente X", tax_id=tax_id)

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AccountCreateRequest(
                holder_name="Cliente X", tax_id="99988877700", email="not-an-email"
            )

    def test_valid_email_accepted(self) -> None:
        req = AccountCreateRequest(
            holder_name="Cliente X", tax_id="99988877700", email="cliente@teste.com"
        )
        assert req.email == "cliente@teste.com"


class TestAccountUpdateRequest:
    def test_id_must_be_uuid(self) -> None:
        with pytest.raises(ValidationError):
            AccountUpdateRequest(id="abc", holder_name="X", tax_id="99988877700")

    def test_negative_version_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AccountUpdateRequest(
                id="6f1c7a52-3a55-4c1e-9d0b-2f0d5c9e8a11",
                holder_name="X",
                tax_id="99988877700",
                version=-1,
            )


class TestReadModels:
    def test_summary_label_follows_active(self) -> None:
        assert AccountSummaryView.from_domain(_account(True)).status_label == "Active"
        assert AccountSummaryView.from_domain(_account(False)).status_label == "Inactive"

    def test_summary_uses_holder_name_as_name(self) -> None:
        view = AccountSummaryView.from_domain(_account(True))
        assert view.name == "Ativa1"

    def test_status_summary_total(self) -> None:
        summary = StatusSummary.from_domain(StatusCounts(active=2, inactive=2))
        assert summary.total_count == 4

    def test_full_entity_exposes_lifecycle_fields(self) -> None:
        resp = AccountResponse.from_domain(_account(False))
        dumped = resp.model_dump(mode="json")
        assert dumped["deleted_at"] is None
        assert dumped["updated_at"] is None
        assert dumped["version"] == 0

    def test_list_payload_survives_cache_format(self) -> None:
        views = [AccountSummaryView.from_domain(_account(True))]
        payload = SummaryViewListAdapter.dump_json(views)
        assert SummaryViewListAdapter.validate_json(payload) == views
