"""
Analytics Service

This service shapes the Visit Store aggregations into the six analytics views
of a slug. It assumes the caller already passed the ownership guard.

Views:
- summary: total clicks and approximate unique visitors
- time_series: clicks per UTC day (sparse, ascending)
- referrers: top referrers by clicks
- devices / browsers / operating_systems: clicks per client category

Unique visitors are approximated by distinct (IP address, user agent) pairs.
The same person on two browsers counts twice and a shared IP with one browser
counts once; this is the intended definition, not a bug to fix.

Every view is a fresh read; there is no cached or shared aggregation state.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortify.core.setting import settings
from shortify.services.visit_store import VisitStore


class AnalyticsService:
    """Service computing the analytics views of one slug."""

    def __init__(self, session: AsyncSession, store: Optional[VisitStore] = None):
        self.session = session
        self.store = store or VisitStore(session)

    async def summary(self, slug: str) -> dict:
        total_clicks, unique_visitors = await self.store.count_clicks_and_pairs(slug)
        return {
            "total_clicks": total_clicks,
            "unique_visitors": unique_visitors,
        }

    async def time_series(self, slug: str) -> list[dict]:
        rows = await self.store.group_by_day(slug)
        return [{"date": day, "count": count} for day, count in rows]

    async def referrers(self, slug: str, limit: Optional[int] = None) -> list[dict]:
        """
        Top referrers, most clicks first.

        Equal counts are ordered by referrer, with "no referrer" (None) first.
        """
        rows = await self.store.group_by_field(
            slug, "referrer", limit=limit or settings.REFERRER_LIMIT
        )
        return [{"referrer": referrer, "count": count} for referrer, count in rows]

    async def devices(self, slug: str) -> list[dict]:
        rows = await self.store.group_by_field(slug, "device_type")
        return [{"device_type": device_type, "count": count} for device_type, count in rows]

    async def browsers(self, slug: str) -> list[dict]:
        rows = await self.store.group_by_field(slug, "browser")
        return [{"browser": browser, "count": count} for browser, count in rows]

    async def operating_systems(self, slug: str) -> list[dict]:
        rows = await self.store.group_by_field(slug, "os")
        return [{"os": os_name, "count": count} for os_name, count in rows]
