from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.security import LoginIn, TokenOut
from app.security.auth import authenticate_admin
from app.security.dependencies import get_token_service
from app.security.tokens import TokenService

router = APIRouter(prefix="/api/v1/admin", tags=["admin-auth"])


@router.post("/login", response_model=TokenOut)
def login(
    credentials: LoginIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> TokenOut:
    admin = authenticate_admin(db, credentials.username, credentials.password)
    return TokenOut(token=tokens.issue(admin))
