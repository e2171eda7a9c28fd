"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes (URL management, analytics, redirect)
- Middleware (logging, CORS)
- Error rendering: every domain exception becomes {"error": "..."}
- Application metadata

Design Decisions:
- Clean separation: Routes, middleware, and app config are separate
- The catch-all redirect router is included last
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shortify.api import analytics, redirect, urls
from shortify.core.exceptions import StoreError, URLShortenerException
from shortify.core.rate_limit import limiter
from shortify.core.setting import settings
from shortify.db.session import create_tables
from shortify.middleware.logging import add_logging_middleware, configure_logging

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Shortify",
    description="URL shortening service with per-owner click analytics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(URLShortenerException)
async def shortify_exception_handler(request: Request, exc: URLShortenerException):
    """Render domain errors as {"error": message} with their status code."""
    if isinstance(exc, StoreError):
        logger.error(
            f"{request.method} {request.url.path} failed: {exc}",
            exc_info=exc.original_error or exc
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render malformed request input as a 400 with the first problem found."""
    return JSONResponse(status_code=400, content={"error": describe_validation_error(exc)})


def describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = next((str(part) for part in reversed(first.get("loc", ())) if part != "body"), None)
    if field is None:
        return first.get("msg", "Invalid request")
    if first.get("type") == "missing":
        return f"{field} is required"
    return f"{field}: {first.get('msg', 'invalid value')}"


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# Health endpoints defined before router to match before catch-all route
@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Shortify",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy"}


app.include_router(urls.router)
app.include_router(analytics.router)
app.include_router(redirect.router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration and prepare the database."""
    settings.log_startup_checks()
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
