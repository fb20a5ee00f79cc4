from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db.filters import scope_suggestions
from app.models.security import Department
from app.models.suggestions import Suggestion, SuggestionStatus
from app.schemas.suggestions import DailyTrend, DashboardStats, DepartmentCount
from app.security.context import SessionClaims

TREND_DAYS = 7


def _count(db: Session, claims: SessionClaims, *criteria) -> int:
    stmt = scope_suggestions(select(func.count(Suggestion.id)), claims)
    if criteria:
        stmt = stmt.where(*criteria)
    return db.scalar(stmt) or 0


def _daily_counts(db: Session, claims: SessionClaims, column, since: datetime, *criteria) -> dict[str, int]:
    day = func.date(column)
    stmt = scope_suggestions(select(day, func.count(Suggestion.id)), claims).where(column >= since, *criteria).group_by(day)
    # SQLite returns 'YYYY-MM-DD' strings, other backends date objects; str() agrees on both.
    return {str(row[0]): row[1] for row in db.execute(stmt)}


def dashboard_stats(db: Session, claims: SessionClaims, today: date | None = None) -> DashboardStats:
    """
    Aggregate counts for the admin dashboard, narrowed to the caller's scope.

    The trend covers the last seven days including today, oldest first;
    a suggestion counts as resolved on the day it was last updated.
    """

    today = today or datetime.utcnow().date()
    first_day = today - timedelta(days=TREND_DAYS - 1)
    since = datetime.combine(first_day, datetime.min.time())

    total = _count(db, claims)
    pending = _count(db, claims, Suggestion.status == SuggestionStatus.PENDING_REVIEW)
    processing = _count(db, claims, Suggestion.status == SuggestionStatus.IN_PROGRESS)
    resolved = _count(db, claims, Suggestion.status == SuggestionStatus.RESOLVED)
    rate = (resolved / total) * 100 if total else 0.0

    new_by_day = _daily_counts(db, claims, Suggestion.created_at, since)
    resolved_by_day = _daily_counts(
        db, claims, Suggestion.updated_at, since, Suggestion.status == SuggestionStatus.RESOLVED
    )

    trend = []
    for offset in range(TREND_DAYS):
        day = (first_day + timedelta(days=offset)).isoformat()
        trend.append(DailyTrend(date=day, new=new_by_day.get(day, 0), resolved=resolved_by_day.get(day, 0)))

    dept_count = func.count(Suggestion.id).label("suggestion_count")
    dept_stmt = scope_suggestions(
        select(Department.name, dept_count)
        .select_from(Suggestion)
        .join(Department, Department.id == Suggestion.department_id),
        claims,
    ).group_by(Department.name).order_by(dept_count.desc(), Department.name)

    by_dept = [DepartmentCount(department_name=row.name, count=row.suggestion_count) for row in db.execute(dept_stmt)]

    return DashboardStats(
        total_suggestions=total,
        pending_suggestions=pending,
        processing_suggestions=processing,
        resolved_suggestions=resolved,
        resolution_rate=rate,
        weekly_trend=trend,
        suggestions_by_dept=by_dept,
    )
