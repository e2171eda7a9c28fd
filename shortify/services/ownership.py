"""
Ownership Guard

Binds analytics and management of a slug to the caller recorded as its creator.
The check is read-only and identical for every guarded operation.
"""

import logging
from typing import Optional

from shortify.core.exceptions import ForbiddenError, NoOwnerError, SlugNotFoundError, UnauthenticatedError
from shortify.db.models import Url
from shortify.services.url_service import URLDirectoryService

logger = logging.getLogger(__name__)


class OwnershipGuard:
    """Authorizes a caller against a slug's recorded creator."""

    def __init__(self, directory: URLDirectoryService):
        self.directory = directory

    async def authorize(self, slug: str, caller_id: Optional[str]) -> Url:
        """
        Return the Url for `slug` if `caller_id` created it.

        Checks run in this order:
        1. the slug must exist
        2. a caller identity must be present
        3. the Url must have a creator (anonymous URLs have no owner)
        4. the creator must be the caller

        Raises:
            SlugNotFoundError, UnauthenticatedError, NoOwnerError, ForbiddenError
        """
        url = await self.directory.find_by_slug(slug)
        if url is None:
            raise SlugNotFoundError(slug)

        if not caller_id:
            raise UnauthenticatedError()

        if not url.creator_id:
            raise NoOwnerError(slug)

        if url.creator_id != caller_id:
            logger.info(f"Caller {caller_id} denied access to slug {slug}")
            raise ForbiddenError(slug)

        return url
