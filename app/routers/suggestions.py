from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.suggestions import Suggestion
from app.routers.params import RowId
from app.schemas.suggestions import SuggestionIn, SuggestionOut, SuggestionPage, TrackingCodeOut, UpvoteOut
from app.security.decorators import rate_limited
from app.services import suggestions as service

router = APIRouter(prefix="/api/v1", tags=["suggestions"])


def page_response(page: service.Page) -> SuggestionPage:
    return SuggestionPage(
        total=page.total,
        page=page.pagination.page,
        page_size=page.pagination.page_size,
        data=[SuggestionOut.model_validate(item) for item in page.items],
    )


@router.post("/suggestions", response_model=TrackingCodeOut)
@rate_limited()
def submit_suggestion(data: SuggestionIn, db: Session = Depends(get_db)) -> TrackingCodeOut:
    suggestion = service.submit(db, data)
    return TrackingCodeOut(tracking_code=suggestion.tracking_code)


@router.get("/suggestions", response_model=SuggestionPage)
def list_public_suggestions(
    page: str | None = Query(None),
    page_size: str | None = Query(None, alias="pageSize"),
    department_id: str | None = Query(None),
    db: Session = Depends(get_db),
) -> SuggestionPage:
    pagination = service.Pagination.from_query(page, page_size)
    result = service.list_public(db, pagination, service.parse_optional_id(department_id))
    return page_response(result)


@router.get("/suggestions/{tracking_code}", response_model=SuggestionOut)
@rate_limited()
def get_suggestion_by_tracking_code(tracking_code: str, db: Session = Depends(get_db)) -> Suggestion:
    return service.get_by_tracking_code(db, tracking_code)


@router.post("/suggestions/{id}/upvote", response_model=UpvoteOut)
@rate_limited()
def upvote_suggestion(id: RowId, db: Session = Depends(get_db)) -> UpvoteOut:
    return UpvoteOut(upvotes=service.upvote(db, id))
