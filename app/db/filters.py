from __future__ import annotations

from sqlalchemy import ColumnElement, Select, or_

from app.security.access import sees_all_departments
from app.security.context import SessionClaims


def suggestion_scope_criteria(claims: SessionClaims) -> ColumnElement[bool] | None:
    """
    WHERE criteria limiting suggestions to the caller's department scope.

    Returns None when the caller sees every department. Suggestions without
    a department belong to every department and always pass.
    """

    if sees_all_departments(claims):
        return None

    # Local import to avoid cycles.
    from app.models.suggestions import Suggestion  # noqa: WPS433 (local import)

    if claims.department_id is None:
        return Suggestion.department_id.is_(None)
    return or_(Suggestion.department_id == claims.department_id, Suggestion.department_id.is_(None))


def scope_suggestions(stmt: Select, claims: SessionClaims) -> Select:
    """
    Narrow a statement to the suggestions the caller may see.

    The criteria goes into the statement itself (rows are never post-filtered),
    so a COUNT built from the same statement reports only visible rows and
    pagination totals stay honest.
    """

    criteria = suggestion_scope_criteria(claims)
    if criteria is None:
        return stmt
    return stmt.where(criteria)
