from __future__ import annotations

import logging

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from app.db.base import Base
from app.db.session import create_session_factory
from app.models import security as _security_models  # noqa: F401  (register tables)
from app.models import suggestions as _suggestion_models  # noqa: F401  (register tables)
from app.models.security import AdminUser, Department, Role
from app.security.auth import hash_password
from app.settings import Settings

logger = logging.getLogger(__name__)


def init_db(engine: Engine, settings: Settings) -> None:
    """
    Create tables + seed first-boot data.

    Seeds the configured departments and the root super admin. Each step
    only runs when its table has nothing to build on, so restarts never
    duplicate or overwrite anything.
    """

    Base.metadata.create_all(bind=engine)

    with create_session_factory(engine)() as db:
        seed(db, settings)


def seed(db: Session, settings: Settings) -> None:
    if db.execute(select(Department.id).limit(1)).first() is None:
        db.add_all([Department(name=name) for name in settings.seed_departments])
        db.flush()
        logger.info("Seeded %s departments", len(settings.seed_departments))

    has_super_admin = db.execute(select(AdminUser.id).where(AdminUser.role == Role.SUPER_ADMIN).limit(1)).first()
    if has_super_admin is None:
        db.add(
            AdminUser(
                username=settings.root_admin_username,
                password_hash=hash_password(settings.root_admin_password),
                role=Role.SUPER_ADMIN,
                department_id=None,
                can_view_all=True,
            )
        )
        logger.warning("Seeded root super admin %r with the configured placeholder password", settings.root_admin_username)

    db.commit()
