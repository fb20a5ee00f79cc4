"""
Admin account and department management (super admin only).

The first-created super admin is the root account: it can never be updated
or deleted through this API, not even by another super admin.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.errors import Conflict, NotFound, ValidationError
from app.models.security import AdminUser, Department, Role
from app.models.suggestions import Reply, Suggestion
from app.schemas.security import AdminCreate, AdminUpdate
from app.security.access import ensure_not_root, ensure_super_admin, normalize_assignment
from app.security.auth import hash_password
from app.security.context import SessionClaims

logger = logging.getLogger(__name__)


def root_admin_id(db: Session) -> int | None:
    return db.scalar(select(func.min(AdminUser.id)).where(AdminUser.role == Role.SUPER_ADMIN))


def _get_admin(db: Session, admin_id: int) -> AdminUser:
    admin = db.scalars(
        select(AdminUser).where(AdminUser.id == admin_id).options(selectinload(AdminUser.department))
    ).first()
    if admin is None:
        raise NotFound("Admin user not found")
    return admin


def _require_department(db: Session, department_id: int | None) -> None:
    if department_id is not None and db.get(Department, department_id) is None:
        raise ValidationError("Invalid department ID")


# ---- Admin accounts -----------------------------------------------------------------


def list_admins(db: Session, claims: SessionClaims) -> list[AdminUser]:
    ensure_super_admin(claims)
    stmt = select(AdminUser).options(selectinload(AdminUser.department)).order_by(AdminUser.id)
    return list(db.scalars(stmt).all())


def create_admin(db: Session, claims: SessionClaims, data: AdminCreate) -> AdminUser:
    ensure_super_admin(claims)

    department_id = normalize_assignment(data.role, data.department_id, data.can_view_all)
    _require_department(db, department_id)

    if db.scalar(select(AdminUser.id).where(AdminUser.username == data.username)) is not None:
        raise Conflict("Username already exists")

    admin = AdminUser(
        username=data.username,
        password_hash=hash_password(data.password),
        role=data.role,
        department_id=department_id,
        can_view_all=data.can_view_all,
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Username already exists") from exc

    logger.info("Admin created id=%s role=%s by admin_id=%s", admin.id, admin.role.value, claims.admin_id)
    return _get_admin(db, admin.id)


def update_admin(db: Session, claims: SessionClaims, admin_id: int, data: AdminUpdate) -> AdminUser:
    ensure_super_admin(claims)
    ensure_not_root(admin_id, root_admin_id(db), "edit")

    admin = _get_admin(db, admin_id)

    role = data.role or admin.role
    can_view_all = admin.can_view_all if data.can_view_all is None else data.can_view_all
    # An explicit null clears the department; omitting the field keeps it.
    requested_department = data.department_id if "department_id" in data.model_fields_set else admin.department_id

    department_id = normalize_assignment(role, requested_department, can_view_all)
    _require_department(db, department_id)

    admin.role = role
    admin.department_id = department_id
    admin.can_view_all = can_view_all
    if data.password:
        admin.password_hash = hash_password(data.password)

    db.commit()
    logger.info("Admin updated id=%s by admin_id=%s", admin_id, claims.admin_id)
    return _get_admin(db, admin_id)


def delete_admin(db: Session, claims: SessionClaims, admin_id: int) -> None:
    ensure_super_admin(claims)
    ensure_not_root(admin_id, root_admin_id(db), "delete")

    admin = _get_admin(db, admin_id)

    # Replies outlive their author.
    db.execute(
        update(Reply).where(Reply.replier_id == admin.id).values(replier_id=None).execution_options(synchronize_session=False)
    )
    db.delete(admin)
    db.commit()
    logger.info("Admin deleted id=%s by admin_id=%s", admin_id, claims.admin_id)


# ---- Departments --------------------------------------------------------------------


def list_departments(db: Session) -> list[Department]:
    return list(db.scalars(select(Department).order_by(Department.id)).all())


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Department name must not be blank")
    return cleaned


def _ensure_name_free(db: Session, name: str, exclude_id: int | None = None) -> None:
    stmt = select(Department.id).where(Department.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Department.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise Conflict("Department name already exists")


def create_department(db: Session, claims: SessionClaims, name: str) -> Department:
    ensure_super_admin(claims)
    name = _clean_name(name)
    _ensure_name_free(db, name)

    department = Department(name=name)
    db.add(department)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Department name already exists") from exc

    db.refresh(department)
    logger.info("Department created id=%s by admin_id=%s", department.id, claims.admin_id)
    return department


def update_department(db: Session, claims: SessionClaims, department_id: int, name: str) -> Department:
    ensure_super_admin(claims)
    department = db.get(Department, department_id)
    if department is None:
        raise NotFound("Department not found")

    name = _clean_name(name)
    _ensure_name_free(db, name, exclude_id=department_id)

    department.name = name
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Department name already exists") from exc

    db.refresh(department)
    return department


def delete_department(db: Session, claims: SessionClaims, department_id: int) -> None:
    ensure_super_admin(claims)
    department = db.get(Department, department_id)
    if department is None:
        raise NotFound("Department not found")

    assigned = db.scalar(select(func.count(AdminUser.id)).where(AdminUser.department_id == department_id)) or 0
    if assigned:
        raise ValidationError("Cannot delete department with assigned admin users")

    # Orphaned suggestions become addressed to all departments.
    db.execute(
        update(Suggestion)
        .where(Suggestion.department_id == department_id)
        .values(department_id=None, updated_at=Suggestion.updated_at)
        .execution_options(synchronize_session=False)
    )
    db.delete(department)
    db.commit()
    logger.info("Department deleted id=%s by admin_id=%s", department_id, claims.admin_id)
