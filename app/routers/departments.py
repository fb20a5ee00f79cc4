from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.security import Department
from app.schemas.security import DepartmentOut
from app.services import admins

router = APIRouter(prefix="/api/v1", tags=["departments"])


@router.get("/departments", response_model=list[DepartmentOut])
def list_departments(db: Session = Depends(get_db)) -> list[Department]:
    return admins.list_departments(db)
