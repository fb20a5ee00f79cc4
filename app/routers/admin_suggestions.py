from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.suggestions import Reply, Suggestion
from app.routers.params import RowId
from app.routers.suggestions import page_response
from app.schemas.suggestions import (
    BulkDeleteIn,
    BulkDeleteOut,
    DashboardStats,
    ReplyIn,
    ReplyOut,
    StatusIn,
    SuggestionOut,
    SuggestionPage,
)
from app.security.context import SessionClaims
from app.security.dependencies import get_current_claims
from app.services import stats
from app.services import suggestions as service

router = APIRouter(prefix="/api/v1/admin", tags=["admin-suggestions"])


@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> DashboardStats:
    return stats.dashboard_stats(db, claims)


@router.get("/suggestions", response_model=SuggestionPage)
def list_suggestions(
    page: str | None = Query(None),
    page_size: str | None = Query(None, alias="pageSize"),
    status: str | None = Query(None),
    department_id: str | None = Query(None),
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> SuggestionPage:
    # Department scoping is applied inside the service before these filters.
    result = service.list_for_admin(
        db,
        claims,
        service.Pagination.from_query(page, page_size),
        status=service.parse_status_filter(status),
        department_id=service.parse_optional_id(department_id),
    )
    return page_response(result)


@router.delete("/suggestions", response_model=BulkDeleteOut)
def delete_suggestions(
    data: BulkDeleteIn,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> BulkDeleteOut:
    return BulkDeleteOut(deleted=service.bulk_delete(db, claims, data.ids))


@router.get("/suggestions/{id}", response_model=SuggestionOut)
def get_suggestion(
    id: RowId,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Suggestion:
    return service.get_for_admin(db, claims, id)


@router.put("/suggestions/{id}/status", response_model=SuggestionOut)
def update_suggestion_status(
    id: RowId,
    data: StatusIn,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Suggestion:
    return service.update_status(db, claims, id, data.status)


@router.post("/suggestions/{id}/replies", response_model=ReplyOut)
def add_reply(
    id: RowId,
    data: ReplyIn,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Reply:
    return service.add_reply(db, claims, id, data.content)
