"""
Background Task Helpers

Provides helper functions for background tasks that create their own database sessions.
Background tasks cannot use the endpoint's session as it's closed after the endpoint returns.
"""

import logging
from typing import Optional

from shortify.db.session import async_session_maker
from shortify.services.visit_logger import VisitLoggerService

logger = logging.getLogger(__name__)


async def log_visit_background(
    url_id: int,
    slug: str,
    ip_address: Optional[str],
    referrer: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """
    Background task to record a visit after the redirect was sent.

    Any failure is logged and dropped: losing an analytics event must never
    affect a redirect.
    """
    try:
        async with async_session_maker() as session:
            visit_logger = VisitLoggerService(session)
            await visit_logger.log_visit(
                url_id=url_id,
                slug=slug,
                ip_address=ip_address,
                referrer=referrer,
                user_agent=user_agent,
            )
    except Exception as e:
        logger.error(
            f"Failed to log visit for {slug}: {str(e)}",
            exc_info=True
        )
