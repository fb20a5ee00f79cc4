from __future__ import annotations

import logging

import bcrypt
from fastapi import Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.errors import Unauthenticated
from app.models.security import AdminUser
from app.security.config import SecurityConfig

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of input.
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def extract_bearer_token(request: Request, config: SecurityConfig) -> str:
    """
    Pull the token out of `Authorization: Bearer <token>`.

    Missing or malformed headers are 401s with a format message.
    """

    header_name = config.auth.authorization_header
    bearer_prefix = config.auth.bearer_prefix

    raw = request.headers.get(header_name)
    if not raw:
        logger.info("Missing Authorization header (auth required) path=%s method=%s", request.url.path, request.method)
        raise Unauthenticated(f"{header_name} header is required")

    parts = raw.split(" ")
    if len(parts) != 2 or parts[0] != bearer_prefix or not parts[1].strip():
        logger.warning("Invalid Authorization header format path=%s method=%s", request.url.path, request.method)
        raise Unauthenticated(f"{header_name} header format must be {bearer_prefix} {{token}}")

    return parts[1].strip()


def authenticate_admin(db: Session, username: str, password: str) -> AdminUser:
    """Return the admin for valid credentials; the same 401 for unknown user and bad password."""

    admin = db.execute(select(AdminUser).where(AdminUser.username == username)).scalar_one_or_none()
    if admin is None or not verify_password(password, admin.password_hash):
        logger.info("Login failed username=%s", username)
        raise Unauthenticated("Invalid credentials")

    logger.info("Login succeeded admin_id=%s", admin.id)
    return admin
