"""
Visit Store

Append-only persistence for visit events plus the slug-scoped aggregation
queries the analytics views are built from. Every query here runs in the
database; nothing is aggregated in Python.

Queries:
- count_clicks_and_pairs: number of visits and of distinct (ip_address, user_agent)
  pairs, read together in one statement
- group_by_day: visits per UTC day, ascending
- group_by_field: visits per value of one categorical column
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from shortify.core.exceptions import StoreError
from shortify.db.interface import DatabaseAdapter
from shortify.db.models import Visit, as_utc
from shortify.db.session import db_adapter

# Columns that may be grouped on; anything else is a programming error
GROUPABLE_FIELDS = {
    "referrer": Visit.referrer,
    "device_type": Visit.device_type,
    "browser": Visit.browser,
    "os": Visit.os,
}


class VisitStore:
    """
    Visit persistence and aggregation queries.

    Reads never mutate the table, so any number of them may run alongside
    ingest appends. A read may or may not see a visit appended concurrently.
    """

    def __init__(self, session: AsyncSession, adapter: Optional[DatabaseAdapter] = None):
        self.session = session
        self.adapter = adapter or db_adapter

    async def append(self, visit: Visit) -> Visit:
        """
        Persist one visit.

        visited_at is converted to UTC first; the column keeps no offset and
        day buckets are UTC days.

        Raises:
            StoreError: If the insert fails
        """
        visit.visited_at = as_utc(visit.visited_at)
        self.session.add(visit)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to append visit for '{visit.slug}'", original_error=e) from e
        return visit

    async def count_clicks_and_pairs(self, slug: str) -> tuple[int, int]:
        """
        Count visits and distinct (ip_address, user_agent) pairs for a slug.

        Both counts come from a single SELECT so they describe the same set of
        rows, even while visits are being appended. Missing values group
        together, as DISTINCT treats NULLs as equal.

        Returns:
            (total visits, distinct pairs)
        """
        pair_visit = aliased(Visit)
        pairs = (
            select(pair_visit.ip_address, pair_visit.user_agent)
            .where(pair_visit.slug == slug)
            .distinct()
            .subquery()
        )
        distinct_count = select(func.count()).select_from(pairs).scalar_subquery()
        statement = (
            select(func.count(), distinct_count)
            .select_from(Visit)
            .where(Visit.slug == slug)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StoreError(f"Visit query failed for '{slug}'", original_error=e) from e
        total, distinct = result.one()
        return total or 0, distinct or 0

    async def group_by_day(self, slug: str) -> list[tuple[str, int]]:
        """
        Count visits per UTC calendar day.

        Returns:
            (YYYY-MM-DD, count) pairs in ascending day order; days without
            visits are absent
        """
        day = self.adapter.day_bucket(Visit.visited_at).label("day")
        count = func.count().label("count")
        statement = (
            select(day, count)
            .where(Visit.slug == slug)
            .group_by(day)
            .order_by(day)
        )
        return await self._rows(statement, slug)

    async def group_by_field(
        self,
        slug: str,
        field: str,
        limit: Optional[int] = None,
    ) -> list[tuple[Optional[str], int]]:
        """
        Count visits per value of `field`.

        Rows are ordered by count descending, then by value ascending
        (SQL NULL, i.e. "no value", sorts first among equal counts).

        Args:
            slug: Slug to scope the query to
            field: One of GROUPABLE_FIELDS
            limit: Keep only the first `limit` groups

        Raises:
            ValueError: If `field` is not groupable
            StoreError: If the query fails
        """
        column = GROUPABLE_FIELDS.get(field)
        if column is None:
            raise ValueError(f"Cannot group visits by '{field}'")

        count = func.count().label("count")
        statement = (
            select(column, count)
            .where(Visit.slug == slug)
            .group_by(column)
            .order_by(count.desc(), column.asc())
        )
        if limit is not None:
            statement = statement.limit(limit)
        return await self._rows(statement, slug)

    async def _rows(self, statement, slug: str) -> list[tuple]:
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StoreError(f"Visit query failed for '{slug}'", original_error=e) from e
        return [(value, count) for value, count in result.all()]
