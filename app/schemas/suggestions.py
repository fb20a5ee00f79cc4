from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from app.models.suggestions import SuggestionStatus
from app.schemas.security import MAX_ID, DepartmentOut, ReplierOut

TITLE_MAX_CHARS = 100
CONTENT_MAX_CHARS = 3000


class SuggestionIn(BaseModel):
    # Lengths are counted in characters, not bytes.
    title: str = Field(min_length=1, max_length=TITLE_MAX_CHARS)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_CHARS)
    category: str | None = Field(default=None, max_length=50)
    department_id: int | None = Field(default=None, ge=0, le=MAX_ID)
    submitter_name: str | None = Field(default=None, max_length=100)
    submitter_class: str | None = Field(default=None, max_length=100)
    is_public: bool = False


class TrackingCodeOut(BaseModel):
    tracking_code: str


class ReplyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    suggestion_id: int
    content: str
    replier_id: int | None
    replier: ReplierOut | None = None
    created_at: datetime


class SuggestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tracking_code: str
    title: str
    content: str
    category: str | None
    department_id: int | None
    department: DepartmentOut | None = None
    submitter_name: str | None
    submitter_class: str | None
    status: SuggestionStatus
    is_public: bool
    upvotes: int
    created_at: datetime
    updated_at: datetime
    replies: list[ReplyOut] = Field(default_factory=list)


class SuggestionPage(BaseModel):
    total: int
    page: int
    page_size: int
    data: list[SuggestionOut]


class StatusIn(BaseModel):
    status: SuggestionStatus


class ReplyIn(BaseModel):
    content: str = Field(min_length=1)


class BulkDeleteIn(BaseModel):
    ids: list[Annotated[int, Field(ge=1, le=MAX_ID)]]


class BulkDeleteOut(BaseModel):
    deleted: int


class UpvoteOut(BaseModel):
    upvotes: int


class DailyTrend(BaseModel):
    date: str
    new: int
    resolved: int


class DepartmentCount(BaseModel):
    department_name: str
    count: int


class DashboardStats(BaseModel):
    total_suggestions: int
    pending_suggestions: int
    processing_suggestions: int
    resolved_suggestions: int
    resolution_rate: float
    weekly_trend: list[DailyTrend]
    suggestions_by_dept: list[DepartmentCount]
