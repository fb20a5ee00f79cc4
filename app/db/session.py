from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker


def create_db_engine(db_url: str) -> Engine:
    return create_engine(
        db_url,
        connect_args={"check_same_thread": False} if db_url.startswith("sqlite") else {},
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=Session)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Main DB dependency: one session per request, closed when the response is done.

    Sessions come from the factory `create_app()` built for the configured
    database (``app.state.session_factory``). Department scoping is not
    attached to the session; services receive the caller's `SessionClaims`
    explicitly and narrow their own statements (see `app.db.filters`).
    """

    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Database not configured. Was the app built with create_app()?")

    db = session_factory()
    try:
        yield db
    finally:
        db.close()
