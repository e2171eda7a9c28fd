"""
URL Management Endpoints

Endpoints only handle request validation, rate limiting and response shaping;
the URL directory service holds the business logic. Domain exceptions are
rendered by the application-wide handler in main.py.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from shortify.api.deps import get_owned_url, get_url_directory
from shortify.api.schemas import CreateURLRequest, UpdateURLRequest, URLResponse
from shortify.core.rate_limit import RATE_LIMITS, limiter
from shortify.core.security import get_optional_caller_id, require_caller_id
from shortify.core.setting import settings
from shortify.db.models import Url
from shortify.services.url_service import UNSET, URLDirectoryService

router = APIRouter(prefix="/api/urls", tags=["URLs"])


def to_url_response(url: Url) -> URLResponse:
    return URLResponse(
        **url.model_dump(exclude={"id"}),
        short_url=f"{settings.BASE_URL.rstrip('/')}/{url.slug}",
    )


@router.post(
    "",
    response_model=URLResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Creates a slug for a long URL; authenticated callers become its owner"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_url(
    request: Request,
    body: CreateURLRequest,
    caller_id: Optional[str] = Depends(get_optional_caller_id),
    directory: URLDirectoryService = Depends(get_url_directory),
) -> URLResponse:
    url = await directory.create_url(
        long_url=body.long_url,
        creator_id=caller_id,
        title=body.title,
        custom_slug=body.custom_slug,
        expires_at=body.expires_at,
    )
    return to_url_response(url)


@router.get("", response_model=list[URLResponse], summary="List the caller's URLs")
@limiter.limit(RATE_LIMITS["manage"])
async def list_urls(
    request: Request,
    caller_id: str = Depends(require_caller_id),
    directory: URLDirectoryService = Depends(get_url_directory),
) -> list[URLResponse]:
    urls = await directory.list_for_creator(caller_id)
    return [to_url_response(url) for url in urls]


@router.get("/{slug}", response_model=URLResponse, summary="Get an owned URL")
@limiter.limit(RATE_LIMITS["manage"])
async def get_url(
    request: Request,
    url: Url = Depends(get_owned_url),
) -> URLResponse:
    return to_url_response(url)


@router.patch("/{slug}", response_model=URLResponse, summary="Disable or re-schedule an owned URL")
@limiter.limit(RATE_LIMITS["manage"])
async def update_url(
    request: Request,
    body: UpdateURLRequest,
    url: Url = Depends(get_owned_url),
    directory: URLDirectoryService = Depends(get_url_directory),
) -> URLResponse:
    provided = body.model_fields_set
    updated = await directory.update_lifecycle(
        url,
        disabled=body.disabled if "disabled" in provided and body.disabled is not None else UNSET,
        expires_at=body.expires_at if "expires_at" in provided else UNSET,
    )
    return to_url_response(updated)
