from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.security import AdminUser, Department
from app.routers.params import RowId
from app.schemas.security import AdminCreate, AdminOut, AdminUpdate, DepartmentIn, DepartmentOut
from app.security.context import SessionClaims
from app.security.dependencies import get_current_claims
from app.services import admins

# Role gate for every route here comes from config/security_config.yaml;
# the services check it again.
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/users", response_model=list[AdminOut])
def list_users(
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> list[AdminUser]:
    return admins.list_admins(db, claims)


@router.post("/users", response_model=AdminOut)
def create_user(
    data: AdminCreate,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> AdminUser:
    return admins.create_admin(db, claims, data)


@router.put("/users/{id}", response_model=AdminOut)
def update_user(
    id: RowId,
    data: AdminUpdate,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> AdminUser:
    return admins.update_admin(db, claims, id, data)


@router.delete("/users/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    id: RowId,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Response:
    admins.delete_admin(db, claims, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/departments", response_model=list[DepartmentOut])
def list_departments(db: Session = Depends(get_db)) -> list[Department]:
    return admins.list_departments(db)


@router.post("/departments", response_model=DepartmentOut)
def create_department(
    data: DepartmentIn,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Department:
    return admins.create_department(db, claims, data.name)


@router.put("/departments/{id}", response_model=DepartmentOut)
def update_department(
    id: RowId,
    data: DepartmentIn,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Department:
    return admins.update_department(db, claims, id, data.name)


@router.delete("/departments/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(
    id: RowId,
    db: Session = Depends(get_db),
    claims: SessionClaims = Depends(get_current_claims),
) -> Response:
    admins.delete_department(db, claims, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
