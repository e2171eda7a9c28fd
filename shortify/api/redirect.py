"""
Redirect Endpoint

Registered last so the catch-all `/{slug}` never shadows other routes.
The visit is recorded by a background task that runs after the 302 is sent;
its outcome cannot change the response.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortify.api.deps import get_client_ip
from shortify.core.rate_limit import RATE_LIMITS, limiter
from shortify.db.session import get_session
from shortify.services.background_tasks import log_visit_background
from shortify.services.redirect_service import RedirectService

router = APIRouter(tags=["Redirect"])


@router.get(
    "/{slug}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Looks up a slug and redirects to its long URL"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    slug: str,
    request: Request,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session)
) -> RedirectResponse:
    """
    Redirect to the long URL for a given slug.

    Raises:
        SlugNotFoundError: 404 if the slug is unknown
        URLGoneError: 410 if the URL is disabled or expired
    """
    url = await RedirectService(session).resolve(slug)

    background_tasks.add_task(
        log_visit_background,
        url_id=url.id,
        slug=url.slug,
        ip_address=get_client_ip(request),
        referrer=request.headers.get("Referer"),
        user_agent=request.headers.get("User-Agent"),
    )

    return RedirectResponse(
        url=url.long_url,
        status_code=status.HTTP_302_FOUND
    )
