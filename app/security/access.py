"""
Access control decisions for admin requests.

Pure functions over `SessionClaims` and a target; no I/O. Precedence:

1. No claims -> `Unauthenticated`.
2. ``super_admin`` sees and changes everything.
3. ``department_admin`` with ``can_view_all`` reads, replies to and
   re-statuses every suggestion, but is still no super admin.
4. Other ``department_admin`` accounts are confined to their own
   department (plus suggestions addressed to all departments).
5. Account and department management is reserved to ``super_admin``.
6. The root super admin is never a valid update/delete target.
7. A ``department_admin`` needs a department unless it can view all.
"""

from __future__ import annotations

import logging

from app.errors import Forbidden, Unauthenticated, ValidationError
from app.models.security import Role
from app.security.context import SessionClaims

logger = logging.getLogger(__name__)


def require_claims(claims: SessionClaims | None) -> SessionClaims:
    if claims is None:
        raise Unauthenticated("Authentication required")
    return claims


def sees_all_departments(claims: SessionClaims) -> bool:
    return claims.is_super_admin or claims.can_view_all


def can_access_department(claims: SessionClaims, department_id: int | None) -> bool:
    if sees_all_departments(claims):
        return True
    # Suggestions without a department are addressed to everybody.
    if department_id is None:
        return True
    return claims.department_id is not None and department_id == claims.department_id


def ensure_can_access_suggestion(claims: SessionClaims, suggestion_id: int, department_id: int | None) -> None:
    if can_access_department(claims, department_id):
        return
    logger.warning(
        "Forbidden suggestion access admin_id=%s suggestion_id=%s department_id=%s",
        claims.admin_id,
        suggestion_id,
        department_id,
    )
    raise Forbidden("You are not authorized to access this suggestion")


def department_filter_for(claims: SessionClaims, requested: int | None) -> int | None:
    """
    Caller-supplied department filter, honored only for cross-department scopes.

    A confined admin is already narrowed to their own department, so the
    request value is ignored rather than rejected.
    """

    if requested is None or not sees_all_departments(claims):
        return None
    return requested


def ensure_super_admin(claims: SessionClaims) -> None:
    if claims.is_super_admin:
        return
    logger.warning("Super admin action denied admin_id=%s role=%s", claims.admin_id, claims.role.value)
    raise Forbidden("This action requires super admin privileges")


def ensure_not_root(target_admin_id: int, root_admin_id: int | None, action: str) -> None:
    if root_admin_id is not None and target_admin_id == root_admin_id:
        logger.warning("Blocked %s of the root super admin id=%s", action, target_admin_id)
        raise Forbidden(f"Cannot {action} the root super admin")


def normalize_assignment(role: Role, department_id: int | None, can_view_all: bool) -> int | None:
    """
    Validate a role/department pairing and return the department to store.

    Super admins are never tied to a department.
    """

    if role is Role.SUPER_ADMIN:
        return None
    if department_id is None and not can_view_all:
        raise ValidationError("Department ID is required for department admins")
    return department_id
