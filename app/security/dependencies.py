from __future__ import annotations

import logging

from fastapi import Depends, Request

from app.errors import Forbidden, RateLimited, Unauthenticated
from app.security.access import require_claims
from app.security.auth import extract_bearer_token
from app.security.config import SecurityConfig
from app.security.context import SessionClaims
from app.security.rate_limit import SlidingWindowRateLimiter
from app.security.tokens import TokenExpired, TokenError, TokenService

logger = logging.getLogger(__name__)


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise RuntimeError("Security config not loaded. Was the app built with create_app()?")
    return config


def get_token_service(request: Request) -> TokenService:
    service = getattr(request.app.state, "token_service", None)
    if service is None:
        raise RuntimeError("Token service not configured. Was the app built with create_app()?")
    return service


def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        raise RuntimeError("Rate limiter not configured. Was the app built with create_app()?")
    return limiter


def get_current_claims(request: Request) -> SessionClaims:
    return require_claims(getattr(request.state, "claims", None))


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_security(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    tokens: TokenService = Depends(get_token_service),
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """
    Global security dependency (configuration-driven).

    Order per request: rate limiter (endpoints marked with `@rate_limited()`),
    then bearer token -> `SessionClaims`, then role gate from the route rule.
    Per-resource department checks happen later, in the services, against
    the claims stored on ``request.state.claims``.
    """

    path = request.url.path
    method = request.method.upper()

    endpoint = request.scope.get("endpoint")
    if endpoint is not None and getattr(endpoint, "__security_rate_limited__", False):
        address = client_address(request)
        if not limiter.hit(address):
            logger.warning("Rate limited client=%s path=%s method=%s", address, path, method)
            raise RateLimited()

    rule = config.match(path, method)
    if not rule.auth_required:
        return

    token = extract_bearer_token(request, config)
    try:
        claims = tokens.validate(token)
    except TokenExpired as exc:
        raise Unauthenticated("Token expired") from exc
    except TokenError as exc:
        raise Unauthenticated("Invalid token") from exc

    if rule.required_roles and claims.role not in rule.required_roles:
        logger.warning(
            "Insufficient role admin_id=%s role=%s path=%s method=%s",
            claims.admin_id,
            claims.role.value,
            path,
            method,
        )
        required = sorted(r.value for r in rule.required_roles)
        raise Forbidden(f"Insufficient role. Required one of: {required}")

    request.state.claims = claims
