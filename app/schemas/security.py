from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.security import Role

# Largest value a SQLite INTEGER column can hold.
MAX_ID = 2**63 - 1


class DepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class DepartmentIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class AdminOut(BaseModel):
    """Admin account as returned by the API. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    department_id: int | None
    department: DepartmentOut | None = None
    can_view_all: bool
    created_at: datetime


class ReplierOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    department_id: int | None


class AdminCreate(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
    role: Role
    department_id: int | None = Field(default=None, ge=1, le=MAX_ID)
    can_view_all: bool = False


class AdminUpdate(BaseModel):
    role: Role | None = None
    department_id: int | None = Field(default=None, ge=1, le=MAX_ID)
    can_view_all: bool | None = None
    password: str | None = Field(default=None, min_length=1)


class LoginIn(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenOut(BaseModel):
    token: str
