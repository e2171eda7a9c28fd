"""
URL Directory Service

This service owns the `urls` table:
- Resolving a slug to its Url record (target, owner, lifecycle flags)
- Creating URLs with generated or custom slugs
- Listing a creator's URLs
- Updating the mutable lifecycle fields (disabled, expires_at)

Design Decisions:
- Random base62 slugs: URL-safe, case-sensitive, not guessable from neighbours
- Uniqueness is enforced by the database; a collision on a generated slug is
  simply retried with a fresh one
- Ownership checks live in the ownership guard, not here
"""

import logging
import secrets
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortify.core.exceptions import InvalidSlugError, InvalidURLError, SlugConflictError, StoreError
from shortify.core.setting import settings
from shortify.core.validators import is_valid_url, sanitize_slug
from shortify.db.models import Url, as_utc

logger = logging.getLogger(__name__)

BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Sentinel for "field not supplied" in partial updates
UNSET = object()


def generate_slug(length: Optional[int] = None) -> str:
    """
    Generate a random base62 slug.

    Args:
        length: Number of characters (defaults to settings.SLUG_LENGTH)

    Example:
        generate_slug(7) -> "aZ3k9Qx"
    """
    length = length or settings.SLUG_LENGTH
    return ''.join(secrets.choice(BASE62_CHARS) for _ in range(length))


class URLDirectoryService:
    """
    Core business logic for the URL directory.

    Separated from the API layer for testability; every storage failure is
    reported as StoreError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_slug(self, slug: str) -> Optional[Url]:
        """
        Retrieve the Url for a given slug.

        Returns:
            Url object if found, None otherwise
        """
        statement = select(Url).where(Url.slug == slug)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up slug '{slug}'", original_error=e) from e
        return result.scalar_one_or_none()

    async def list_for_creator(self, creator_id: str) -> list[Url]:
        """List a creator's URLs, newest first."""
        statement = (
            select(Url)
            .where(Url.creator_id == creator_id)
            .order_by(Url.created_at.desc(), Url.id.desc())
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StoreError("Failed to list URLs", original_error=e) from e
        return list(result.scalars().all())

    async def create_url(
        self,
        long_url: str,
        creator_id: Optional[str] = None,
        title: Optional[str] = None,
        custom_slug: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Url:
        """
        Create a new short URL.

        Args:
            long_url: The redirect target
            creator_id: Caller id, None for anonymous creation
            title: Optional label
            custom_slug: Requested slug, generated when omitted
            expires_at: Optional expiry timestamp

        Returns:
            The persisted Url

        Raises:
            InvalidURLError: If the target URL is not acceptable
            InvalidSlugError: If the custom slug has an unsupported format
            SlugConflictError: If the custom slug is taken
            StoreError: If the database operation fails
        """
        if not is_valid_url(long_url):
            raise InvalidURLError(
                long_url,
                reason="Invalid URL format. URL must use http:// or https:// and have a valid domain"
            )

        if custom_slug is not None:
            slug = sanitize_slug(custom_slug)
            if slug is None:
                raise InvalidSlugError(custom_slug)
            if await self.find_by_slug(slug) is not None:
                raise SlugConflictError(slug)
            return await self._insert(slug, long_url, creator_id, title, expires_at)

        for _ in range(settings.SLUG_GENERATION_ATTEMPTS):
            slug = generate_slug()
            if await self.find_by_slug(slug) is not None:
                continue
            try:
                return await self._insert(slug, long_url, creator_id, title, expires_at)
            except SlugConflictError:
                # Lost a race for the same slug, try another one
                logger.info(f"Generated slug {slug} collided, retrying")
        raise StoreError("Could not generate a unique slug")

    async def _insert(
        self,
        slug: str,
        long_url: str,
        creator_id: Optional[str],
        title: Optional[str],
        expires_at: Optional[datetime],
    ) -> Url:
        url = Url(
            slug=slug,
            long_url=long_url,
            title=title,
            creator_id=creator_id,
            expires_at=as_utc(expires_at),
        )
        self.session.add(url)
        try:
            await self.session.commit()
            await self.session.refresh(url)
        except IntegrityError as e:
            await self.session.rollback()
            raise SlugConflictError(slug) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to create URL: {str(e)}", original_error=e) from e

        logger.info(f"Created URL slug={slug} creator={creator_id or 'anonymous'}")
        return url

    async def update_lifecycle(
        self,
        url: Url,
        disabled=UNSET,
        expires_at=UNSET,
    ) -> Url:
        """
        Update the mutable fields of an (already authorized) Url.

        Fields left as UNSET are not touched; expires_at=None clears the expiry.
        """
        if disabled is not UNSET:
            url.disabled = bool(disabled)
        if expires_at is not UNSET:
            url.expires_at = as_utc(expires_at)

        self.session.add(url)
        try:
            await self.session.commit()
            await self.session.refresh(url)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to update URL '{url.slug}'", original_error=e) from e
        return url
