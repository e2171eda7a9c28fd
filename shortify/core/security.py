"""
Caller Identity

Shortify does not issue sessions itself; an external identity provider hands
out HS256 JWTs whose `sub` claim is the user id. This module only verifies
those tokens and exposes the caller id to the endpoints.

Tokens are read from the `Authorization: Bearer` header first and fall back
to the `access_token` cookie.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shortify.core.exceptions import UnauthenticatedError
from shortify.core.setting import settings

ACCESS_TOKEN_COOKIE = "access_token"

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    subject: str,
    extra_claims: Optional[dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint an access token for `subject`.

    Used by tooling and tests; production tokens come from the identity provider.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = dict(extra_claims or {})
    claims.update({"sub": subject, "exp": expire})
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials

    cookie_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if cookie_token:
        # Cookies may carry the scheme prefix as well
        if cookie_token.startswith("Bearer "):
            return cookie_token.split(" ", 1)[1]
        return cookie_token
    return None


def _caller_from_payload(payload: Optional[dict[str, Any]]) -> Optional[str]:
    if not payload:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject


async def get_caller_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Resolve the caller id of the request.

    Returns:
        The caller id, or None when no token was sent

    Raises:
        UnauthenticatedError: If a token was sent but is invalid or expired
    """
    token = _extract_token(request, credentials)
    if token is None:
        return None

    caller_id = _caller_from_payload(decode_access_token(token))
    if caller_id is None:
        raise UnauthenticatedError("Invalid or expired token")
    return caller_id


async def get_optional_caller_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Like get_caller_id, but an unusable token just means "anonymous"."""
    token = _extract_token(request, credentials)
    if token is None:
        return None
    return _caller_from_payload(decode_access_token(token))


async def require_caller_id(caller_id: Optional[str] = Depends(get_caller_id)) -> str:
    if caller_id is None:
        raise UnauthenticatedError()
    return caller_id
