"""
Rate Limiting Configuration

Uses slowapi (lightweight, FastAPI-compatible) with IP-based keys.
Limits can be switched off through RATE_LIMIT_ENABLED, e.g. for tests.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from shortify.core.setting import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "shorten": "10/minute",  # URL creation per IP
    "redirect": "100/minute",  # Redirects per IP
    "manage": "60/minute",  # Listing and updating owned URLs
    "analytics": "30/minute",  # Analytics views per IP
}
