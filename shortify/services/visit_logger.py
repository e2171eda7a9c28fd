"""
Visit Logging Service

This service turns a served redirect into a Visit record and appends it
to the Visit Store.

Design Decisions:
- Called from a background task so it never blocks the redirect response
- The user-agent parser is injected and called exactly once per event
- Timestamps are normalized to UTC before they are stored
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortify.db.models import Visit, utc_now
from shortify.services.user_agent import UserAgentParser, parse_user_agent
from shortify.services.visit_store import VisitStore


def build_visit(
    url_id: int,
    slug: str,
    ip_address: Optional[str],
    referrer: Optional[str],
    user_agent: Optional[str],
    parser: UserAgentParser = parse_user_agent,
    visited_at: Optional[datetime] = None,
) -> Visit:
    """
    Derive a Visit from the facts of one redirect request.

    Args:
        url_id: Primary key of the resolved Url
        slug: Slug that was requested
        ip_address: Client IP as seen by the service
        referrer: Referer header, None when absent
        user_agent: Raw User-Agent header, None when absent
        parser: User-agent classifier
        visited_at: Event time, defaults to now (UTC)
    """
    client = parser(user_agent)
    moment = visited_at or utc_now()
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)

    return Visit(
        url_id=url_id,
        slug=slug,
        visited_at=moment,
        ip_address=ip_address,
        referrer=referrer or None,
        user_agent=user_agent,
        browser=client.browser,
        os=client.os,
        device_type=client.device_type,
    )


class VisitLoggerService:
    """
    Service for logging URL visits.

    Designed to run inside background tasks with its own session.
    """

    def __init__(self, session: AsyncSession, parser: UserAgentParser = parse_user_agent):
        self.session = session
        self.parser = parser
        self.store = VisitStore(session)

    async def log_visit(
        self,
        url_id: int,
        slug: str,
        ip_address: Optional[str],
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
        visited_at: Optional[datetime] = None,
    ) -> Visit:
        """
        Derive and append a visit.

        Raises:
            StoreError: If the append fails (callers on the redirect path log it)
        """
        visit = build_visit(
            url_id=url_id,
            slug=slug,
            ip_address=ip_address,
            referrer=referrer,
            user_agent=user_agent,
            parser=self.parser,
            visited_at=visited_at,
        )
        return await self.store.append(visit)
