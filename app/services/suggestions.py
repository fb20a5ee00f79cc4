"""
Suggestion lifecycle: submission, public lookup, admin review and cleanup.

Status moves ``pending-review -> {pending, rejected} -> in-progress ->
{resolved, closed}`` by convention only; any authorized admin may set any
of the six values. Every admin-facing operation takes the caller's
`SessionClaims` and applies the department scope before touching rows.
"""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.db.filters import scope_suggestions
from app.errors import NotFound, ValidationError
from app.models.security import Department
from app.models.suggestions import HIDDEN_FROM_PUBLIC, Reply, Suggestion, SuggestionStatus
from app.schemas.suggestions import SuggestionIn
from app.security.access import department_filter_for, ensure_can_access_suggestion
from app.security.context import SessionClaims

logger = logging.getLogger(__name__)

TRACKING_CODE_LENGTH = 6
TRACKING_CODE_ALPHABET = string.ascii_uppercase + string.digits
_MAX_CODE_ATTEMPTS = 10

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
# Query-string integers above this are treated as garbage.
MAX_QUERY_INT = 2**31 - 1


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @classmethod
    def from_query(cls, page: str | int | None, page_size: str | int | None) -> "Pagination":
        """Non-numeric or non-positive values fall back to the defaults; never an error."""
        return cls(
            page=_positive_int(page) or DEFAULT_PAGE,
            page_size=_positive_int(page_size) or DEFAULT_PAGE_SIZE,
        )


@dataclass(frozen=True)
class Page:
    total: int
    pagination: Pagination
    items: list[Suggestion]


def _positive_int(raw: str | int | None) -> int | None:
    if raw is None:
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if 0 < value <= MAX_QUERY_INT else None


def parse_optional_id(raw: str | int | None) -> int | None:
    """Lenient id from a query string: blank, zero or garbage means "no filter"."""
    return _positive_int(raw)


def parse_status_filter(raw: str | None) -> SuggestionStatus | None:
    if raw is None or not raw.strip():
        return None
    try:
        return SuggestionStatus(raw.strip())
    except ValueError as exc:
        raise ValidationError(f"Unknown status: {raw}") from exc


def generate_tracking_code(length: int = TRACKING_CODE_LENGTH) -> str:
    return "".join(secrets.choice(TRACKING_CODE_ALPHABET) for _ in range(length))


def _with_details(stmt: Select) -> Select:
    return stmt.options(
        selectinload(Suggestion.department),
        selectinload(Suggestion.replies).selectinload(Reply.replier),
    )


def _paginate(db: Session, stmt: Select, pagination: Pagination) -> Page:
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        _with_details(stmt)
        .order_by(Suggestion.created_at.desc(), Suggestion.id.desc())
        .limit(pagination.page_size)
        .offset(pagination.offset)
    ).all()
    return Page(total=total, pagination=pagination, items=list(rows))


def _resolve_department(db: Session, department_id: int | None) -> int | None:
    # 0 and absent both mean "all departments".
    if not department_id:
        return None
    if db.get(Department, department_id) is None:
        raise ValidationError("Invalid department ID")
    return department_id


# ---- Public -------------------------------------------------------------------------


def submit(db: Session, data: SuggestionIn) -> Suggestion:
    department_id = _resolve_department(db, data.department_id)

    for _attempt in range(_MAX_CODE_ATTEMPTS):
        code = generate_tracking_code()
        if db.scalar(select(Suggestion.id).where(Suggestion.tracking_code == code)) is not None:
            continue

        suggestion = Suggestion(
            tracking_code=code,
            title=data.title,
            content=data.content,
            category=data.category,
            department_id=department_id,
            submitter_name=data.submitter_name,
            submitter_class=data.submitter_class,
            status=SuggestionStatus.PENDING_REVIEW,
            is_public=data.is_public,
            upvotes=0,
        )
        db.add(suggestion)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race on the unique tracking code; draw again.
            db.rollback()
            logger.info("Tracking code collision on insert; retrying")
            continue

        db.refresh(suggestion)
        logger.info("Suggestion submitted id=%s department_id=%s", suggestion.id, department_id)
        return suggestion

    raise RuntimeError("Could not allocate a unique tracking code")


def get_by_tracking_code(db: Session, tracking_code: str) -> Suggestion:
    suggestion = db.scalars(_with_details(select(Suggestion).where(Suggestion.tracking_code == tracking_code))).first()
    if suggestion is None:
        raise NotFound("Suggestion not found")
    return suggestion


def list_public(db: Session, pagination: Pagination, department_id: int | None = None) -> Page:
    stmt = select(Suggestion).where(
        Suggestion.is_public.is_(True),
        Suggestion.status.not_in(HIDDEN_FROM_PUBLIC),
    )
    if department_id is not None:
        stmt = stmt.where(Suggestion.department_id == department_id)
    return _paginate(db, stmt, pagination)


def upvote(db: Session, suggestion_id: int) -> int:
    """
    Add one upvote and return the new count.

    The increment happens in the database (``upvotes = upvotes + 1``) so
    concurrent upvotes never overwrite each other.
    """

    result = db.execute(
        update(Suggestion)
        .where(Suggestion.id == suggestion_id)
        .values(upvotes=Suggestion.upvotes + 1, updated_at=Suggestion.updated_at)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Suggestion not found")
    db.commit()

    return db.scalar(select(Suggestion.upvotes).where(Suggestion.id == suggestion_id))


# ---- Admin --------------------------------------------------------------------------


def list_for_admin(
    db: Session,
    claims: SessionClaims,
    pagination: Pagination,
    status: SuggestionStatus | None = None,
    department_id: int | None = None,
) -> Page:
    stmt = scope_suggestions(select(Suggestion), claims)

    if status is not None:
        stmt = stmt.where(Suggestion.status == status)

    requested_department = department_filter_for(claims, department_id)
    if requested_department is not None:
        stmt = stmt.where(Suggestion.department_id == requested_department)

    return _paginate(db, stmt, pagination)


def get_for_admin(db: Session, claims: SessionClaims, suggestion_id: int) -> Suggestion:
    suggestion = db.scalars(_with_details(select(Suggestion).where(Suggestion.id == suggestion_id))).first()
    if suggestion is None:
        raise NotFound("Suggestion not found")
    ensure_can_access_suggestion(claims, suggestion.id, suggestion.department_id)
    return suggestion


def update_status(db: Session, claims: SessionClaims, suggestion_id: int, status: SuggestionStatus) -> Suggestion:
    suggestion = get_for_admin(db, claims, suggestion_id)
    previous = suggestion.status
    suggestion.status = status
    db.commit()
    logger.info(
        "Suggestion status changed id=%s %s -> %s by admin_id=%s",
        suggestion.id,
        previous.value,
        status.value,
        claims.admin_id,
    )
    return get_for_admin(db, claims, suggestion_id)


def add_reply(db: Session, claims: SessionClaims, suggestion_id: int, content: str) -> Reply:
    if not content.strip():
        raise ValidationError("Reply content must not be blank")

    suggestion = get_for_admin(db, claims, suggestion_id)
    reply = Reply(suggestion_id=suggestion.id, content=content, replier_id=claims.admin_id)
    db.add(reply)
    db.commit()
    db.refresh(reply)
    logger.info("Reply added suggestion_id=%s reply_id=%s admin_id=%s", suggestion.id, reply.id, claims.admin_id)
    return reply


def bulk_delete(db: Session, claims: SessionClaims, ids: list[int]) -> int:
    """
    Delete suggestions and their replies in one transaction.

    Unknown ids are ignored. If any found suggestion lies outside the
    caller's scope nothing is deleted.
    """

    unique_ids = sorted(set(ids))
    if not unique_ids:
        raise ValidationError("ids must be a non-empty list")

    found = db.execute(select(Suggestion.id, Suggestion.department_id).where(Suggestion.id.in_(unique_ids))).all()
    for row in found:
        ensure_can_access_suggestion(claims, row.id, row.department_id)

    found_ids = [row.id for row in found]
    if not found_ids:
        return 0

    try:
        db.execute(delete(Reply).where(Reply.suggestion_id.in_(found_ids)).execution_options(synchronize_session=False))
        db.execute(delete(Suggestion).where(Suggestion.id.in_(found_ids)).execution_options(synchronize_session=False))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Bulk delete rolled back ids=%s", found_ids)
        raise

    logger.info("Bulk deleted %s suggestions admin_id=%s", len(found_ids), claims.admin_id)
    return len(found_ids)
