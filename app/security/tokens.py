"""
Issue and validate signed admin session tokens.

Tokens are HS256 JWTs carrying the `SessionClaims` of the admin who logged
in, with a fixed lifetime from issuance (24 hours by default). There is no
refresh: once ``exp`` passes the admin logs in again. Verification is
stateless; the signing key is loaded once at startup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.models.security import AdminUser, Role
from app.security.context import SessionClaims

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)


class TokenError(Exception):
    """Raised when a token cannot be trusted. Do not log the token."""

    pass


class InvalidToken(TokenError):
    pass


class TokenExpired(TokenError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _claims_from_payload(payload: dict[str, Any]) -> SessionClaims:
    try:
        admin_id = int(payload["user_id"])
        username = str(payload["username"])
        role = Role(payload["role"])
        exp = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        raw_dept = payload.get("department_id")
        department_id = int(raw_dept) if raw_dept else None
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise InvalidToken("Invalid token: malformed claims") from exc

    return SessionClaims(
        admin_id=admin_id,
        username=username,
        role=role,
        department_id=department_id,
        can_view_all=bool(payload.get("can_view_all", False)),
        expires_at=exp,
    )


class TokenService:
    """
    Mint and verify session tokens.

    ``clock`` is injectable so issuance time can be pinned in tests;
    verification of ``exp`` uses the real wall clock via PyJWT.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("Token signing key is not configured")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, admin: AdminUser) -> str:
        issued_at = self._clock()
        claims = SessionClaims(
            admin_id=admin.id,
            username=admin.username,
            role=Role(admin.role),
            department_id=admin.department_id,
            can_view_all=admin.can_view_all,
            expires_at=issued_at + self._ttl,
        )
        payload = claims.to_payload()
        payload["iat"] = int(issued_at.timestamp())
        payload["exp"] = int(claims.expires_at.timestamp())
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> SessionClaims:
        """
        Verify signature and expiry, then return the embedded claims.

        Raises `TokenExpired` for a well-signed token past its ``exp`` and
        `InvalidToken` for anything else that fails verification.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"], "verify_signature": True, "verify_exp": True},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Token expired")
            raise TokenExpired("Token expired") from e
        except jwt.InvalidTokenError as e:
            logger.info("Token invalid: %s", type(e).__name__)
            raise InvalidToken("Invalid token") from e

        return _claims_from_payload(payload)
