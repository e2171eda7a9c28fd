"""
Analytics Endpoints

Six read-only views over the visits of one slug. Every endpoint depends on
`get_owned_url`, so only the creator of a slug can read its analytics.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shortify.api.deps import get_owned_url
from shortify.api.schemas import (
    BrowserCount,
    DeviceCount,
    OSCount,
    ReferrerCount,
    SummaryResponse,
    TimeSeriesPoint,
)
from shortify.core.rate_limit import RATE_LIMITS, limiter
from shortify.db.models import Url
from shortify.db.session import get_session
from shortify.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/api/urls/{slug}/analytics", tags=["Analytics"])


def get_analytics_service(session: AsyncSession = Depends(get_session)) -> AnalyticsService:
    return AnalyticsService(session)


@router.get("/summary", response_model=SummaryResponse, summary="Clicks and unique visitors")
@limiter.limit(RATE_LIMITS["analytics"])
async def get_summary(
    request: Request,
    url: Url = Depends(get_owned_url),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.summary(url.slug)


@router.get("/timeseries", response_model=list[TimeSeriesPoint], summary="Clicks per UTC day")
@limiter.limit(RATE_LIMITS["analytics"])
async def get_time_series(
    request: Request,
    url: Url = Depends(get_owned_url),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.time_series(url.slug)


@router.get("/referrers", response_model=list[ReferrerCount], summary="Top referrers")
@limiter.limit(RATE_LIMITS["analytics"])
async def get_referrers(
    request: Request,
    url: Url = Depends(get_owned_url),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.referrers(url.slug)


@router.get("/devices", response_model=list[DeviceCount], summary="Clicks per device type")
@limiter.limit(RATE_LIMITS["analytics"])
async def get_devices(
    request: Request,
    url: Url = Depends(get_owned_url),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.devices(url.slug)


@router.get("/browsers", response_model=list[BrowserCount], summary="Clicks per browser")
@limiter.limit(RATE_LIMITS["analytics"])
async def get_browsers(
    request: Request,
    url: Url = Depends(get_owned_url),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.browsers(url.slug)


@router.get("/os", response_model=list[OSCount], summary="Clicks per operating system")
@limiter.limit(RATE_LIMITS["analytics"])
async def get_operating_systems(
    request: Request,
    url: Url = Depends(get_owned_url),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.operating_systems(url.slug)
