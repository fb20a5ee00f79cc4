"""
Tests for the suggestion tables (ORM).

Uses db_session fixture: fresh in-memory SQLite per test.
"""
from __future__ import annotations

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError

from app.models.security import Department
from app.models.suggestions import Reply, Suggestion, SuggestionStatus


def _suggestion(code: str, department_id: int | None = None, **kwargs) -> Suggestion:
    return Suggestion(tracking_code=code, title="t", content="c", department_id=department_id, **kwargs)


def test_defaults_on_insert(db_session):
    s = _suggestion("AAAAAA")
    db_session.add(s)
    db_session.commit()

    assert s.status is SuggestionStatus.PENDING_REVIEW
    assert s.upvotes == 0
    assert s.is_public is False
    assert s.created_at is not None
    assert s.updated_at is not None


def test_status_stored_as_its_value(db_session):
    db_session.add(_suggestion("AAAAAA", status=SuggestionStatus.IN_PROGRESS))
    db_session.commit()

    raw = db_session.execute(text("SELECT status FROM suggestions")).scalar_one()
    assert raw == "in-progress"


def test_tracking_code_is_unique(db_session):
    db_session.add(_suggestion("SAME01"))
    db_session.commit()

    db_session.add(_suggestion("SAME01"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_deleting_suggestion_cascades_to_replies(db_session):
    s = _suggestion("AAAAAA")
    s.replies.append(Reply(content="first"))
    s.replies.append(Reply(content="second"))
    db_session.add(s)
    db_session.commit()

    db_session.delete(s)
    db_session.commit()

    assert db_session.scalar(select(func.count(Reply.id))) == 0


def test_replies_ordered_by_creation(db_session):
    s = _suggestion("AAAAAA")
    db_session.add(s)
    db_session.flush()
    db_session.add_all([Reply(suggestion_id=s.id, content=str(i)) for i in range(3)])
    db_session.commit()
    db_session.expire_all()

    assert [r.content for r in db_session.get(Suggestion, s.id).replies] == ["0", "1", "2"]


def test_department_is_optional(db_session):
    dept = Department(name="Library")
    db_session.add(dept)
    db_session.flush()
    db_session.add_all([_suggestion("AAAAAA", dept.id), _suggestion("BBBBBB", None)])
    db_session.commit()

    rows = db_session.execute(select(Suggestion.tracking_code, Suggestion.department_id).order_by(Suggestion.id)).all()
    assert rows == [("AAAAAA", dept.id), ("BBBBBB", None)]
