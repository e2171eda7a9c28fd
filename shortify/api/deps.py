"""
Shared FastAPI Dependencies

The ownership guard is exposed here once, as `get_owned_url`, and composed
into every endpoint that needs it.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shortify.core.exceptions import SlugNotFoundError
from shortify.core.security import get_caller_id
from shortify.core.validators import sanitize_slug
from shortify.db.models import Url
from shortify.db.session import get_session
from shortify.services.ownership import OwnershipGuard
from shortify.services.url_service import URLDirectoryService


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract client IP address from request.

    Handles proxies and load balancers by checking X-Forwarded-For header.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else None


def get_url_directory(session: AsyncSession = Depends(get_session)) -> URLDirectoryService:
    return URLDirectoryService(session)


async def get_owned_url(
    slug: str,
    caller_id: Optional[str] = Depends(get_caller_id),
    directory: URLDirectoryService = Depends(get_url_directory),
) -> Url:
    """Authorize the caller against `slug` and hand the Url to the endpoint."""
    sanitized = sanitize_slug(slug)
    if sanitized is None:
        raise SlugNotFoundError(slug)
    return await OwnershipGuard(directory).authorize(sanitized, caller_id)
