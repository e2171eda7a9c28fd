"""
Redirect Service

This service decides whether a slug can be followed.
Recording the visit is a separate, best-effort step scheduled by the endpoint.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortify.core.exceptions import SlugNotFoundError, URLGoneError
from shortify.core.validators import sanitize_slug
from shortify.db.models import Url, as_utc, utc_now
from shortify.services.url_service import URLDirectoryService


class RedirectService:
    """Service for handling URL redirections."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.directory = URLDirectoryService(session)

    async def resolve(self, slug: str, now: Optional[datetime] = None) -> Url:
        """
        Resolve a slug to a followable Url.

        Args:
            slug: Requested slug
            now: Reference time for the expiry check (defaults to now, UTC)

        Returns:
            The Url to redirect to

        Raises:
            SlugNotFoundError: If the slug is malformed or unknown
            URLGoneError: If the Url is disabled, or expired (now > expires_at)
        """
        sanitized = sanitize_slug(slug)
        if sanitized is None:
            raise SlugNotFoundError(slug)

        url = await self.directory.find_by_slug(sanitized)
        if url is None:
            raise SlugNotFoundError(sanitized)

        if url.disabled:
            raise URLGoneError(sanitized, "URL is disabled")

        expires_at = as_utc(url.expires_at)
        if expires_at is not None and as_utc(now or utc_now()) > expires_at:
            raise URLGoneError(sanitized, "URL has expired")

        return url
