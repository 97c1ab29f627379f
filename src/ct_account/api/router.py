"""ct_account REST endpoints.

GET    /accounts                         all accounts (full entity)
POST   /accounts                         create → 201 + Location
GET    /accounts/active | /inactive      summary views by status (cached)
GET    /accounts/deleted                 soft-deleted accounts
GET    /accounts/status-summary          active/inactive/total counts (cached)
GET    /accounts/totals-by-year          accounts created per year (cached)
GET    /accounts/by-period               accounts created in [start, end]
GET    /accounts/by-tax-id/{tax_id}      summary view by CPF (cached)
GET    /accounts/partner-view/{id}       summary view by id
GET    /accounts/{id}                    full entity
PUT    /accounts/{id}                    full replace → 204
DELETE /accounts/{id}                    hard delete → 204
PATCH  /accounts/{id}/activate | /deactivate | /soft-delete | /restore

Fixed paths are declared before /{account_id} so they are not captured by it.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.api.dependencies import get_account_service
from src.ct_account.application.schemas import AccountCreateRequest, AccountUpdateRequest
from src.ct_account.application.service import AccountApplicationService
from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, success_response

router = APIRouter(prefix="/accounts", tags=["accounts"])

Service = Annotated[AccountApplicationService, Depends(get_account_service)]
Db = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("")
async def list_accounts(request: Request, service: Service, db: Db) -> ApiResponse:
    accounts = await service.list_accounts(db)
    return success_response([a.model_dump(mode="json") for a in accounts], request)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    body: AccountCreateRequest,
    request: Request,
    response: Response,
    service: Service,
    db: Db,
) -> ApiResponse:
    created = await service.create_account(db, body)
    response.headers["Location"] = str(request.url_for("get_account", account_id=created.id))
    return success_response(created.model_dump(mode="json"), request)


@router.get("/active")
async def list_active(request: Request, service: Service, db: Db) -> ApiResponse:
    views = await service.list_by_status(db, active=True)
    return success_response([v.model_dump() for v in views], request)


@router.get("/inactive")
async def list_inactive(request: Request, service: Service, db: Db) -> ApiResponse:
    views = await service.list_by_status(db, active=False)
    return success_response([v.model_dump() for v in views], request)


@router.get("/deleted")
async def list_deleted(request: Request, service: Service, db: Db) -> ApiResponse:
    views = await service.list_deleted(db)
    return success_response([v.model_dump() for v in views], request)


@router.get("/status-summary")
async def status_summary(request: Request, service: Service, db: Db) -> ApiResponse:
    summary = await service.status_summary(db)
    return success_response(summary.model_dump(), request)


@router.get("/totals-by-year")
async def totals_by_year(
    request: Request,
    service: Service,
    db: Db,
    years: list[int] = Query(default=[], description="Repeat per year: ?years=2024&years=2025"),
) -> ApiResponse:
    totals = await service.totals_by_year(db, years)
    return success_response([t.model_dump() for t in totals], request)


@router.get("/by-period")
async def list_by_period(
    request: Request,
    service: Service,
    db: Db,
    start: datetime = Query(..., description="Inclusive lower bound on created_at"),
    end: datetime = Query(..., description="Inclusive upper bound on created_at"),
) -> ApiResponse:
    views = await service.list_created_between(db, start, end)
    return success_response([v.model_dump() for v in views], request)


@router.get("/by-tax-id/{tax_id}")
async def get_by_tax_id(
    tax_id: str, request: Request, service: Service, db: Db
) -> ApiResponse:
    view = await service.get_by_tax_id(db, tax_id)
    return success_response(view.model_dump(), request)


@router.get("/partner-view/{account_id}")
async def get_partner_view(
    account_id: UUID, request: Request, service: Service, db: Db
) -> ApiResponse:
    view = await service.get_partner_view(db, str(account_id))
    return success_response(view.model_dump(), request)


@router.get("/{account_id}")
async def get_account(
    account_id: UUID, request: Request, service: Service, db: Db
) -> ApiResponse:
    account = await service.get_account(db, str(account_id))
    return success_response(account.model_dump(mode="json"), request)


@router.put("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_account(
    account_id: UUID, body: AccountUpdateRequest, service: Service, db: Db
) -> Response:
    await service.update_account(db, str(account_id), body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(account_id: UUID, service: Service, db: Db) -> Response:
    await service.delete_account(db, str(account_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{account_id}/activate")
async def activate_account(
    account_id: UUID, request: Request, service: Service, db: Db
) -> ApiResponse:
    result = await service.activate(db, str(account_id))
    return success_response(result.model_dump(), request)


@router.patch("/{account_id}/deactivate")
async def deactivate_account(
    account_id: UUID, request: Request, service: Service, db: Db
) -> ApiResponse:
    result = await service.deactivate(db, str(account_id))
    return success_response(result.model_dump(), request)


@router.patch("/{account_id}/soft-delete")
async def soft_delete_account(
    account_id: UUID, request: Request, service: Service, db: Db
) -> ApiResponse:
    result = await service.soft_delete(db, str(account_id))
    return success_response(result.model_dump(), request)


@router.patch("/{account_id}/restore")
async def restore_account(
    account_id: UUID, request: Request, service: Service, db: Db
) -> ApiResponse:
    result = await service.restore(db, str(account_id))
    return success_response(result.model_dump(), request)
