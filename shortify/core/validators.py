"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.

Security Considerations:
- Slugs are restricted to a URL-safe alphabet before they reach a query
- Length limits prevent DoS attacks
- Only http/https targets are accepted for redirects
"""

import re
from typing import Optional
from urllib.parse import urlparse

MAX_SLUG_LENGTH = 32
MAX_URL_LENGTH = 2048

SLUG_PATTERN = re.compile(r'^[0-9a-zA-Z_-]+$')

ALLOWED_SCHEMES = {'http', 'https'}
MALICIOUS_PATTERNS = ('javascript:', 'data:', 'file:', 'vbscript:')


def sanitize_slug(slug: str) -> Optional[str]:
    """
    Sanitize and validate slug format.

    Slugs may contain base62 characters plus '-' and '_'.

    Args:
        slug: The slug to sanitize

    Returns:
        Sanitized slug if valid, None otherwise
    """
    if not slug or not isinstance(slug, str):
        return None

    slug = slug.strip()

    if not slug or len(slug) > MAX_SLUG_LENGTH:
        return None

    if not SLUG_PATTERN.match(slug):
        return None

    return slug


def validate_url_length(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def is_valid_url(url: str) -> bool:
    """
    Validate URL format and security.

    Checks that URL uses http/https, has valid domain, and doesn't contain
    malicious patterns. Prevents javascript:, file:, and other dangerous schemes.

    Args:
        url: The URL string to validate

    Returns:
        True if valid and safe, False otherwise
    """
    if not isinstance(url, str) or not validate_url_length(url):
        return False

    try:
        result = urlparse(url)
    except ValueError:
        return False

    if not result.scheme or not result.netloc:
        return False

    if result.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    domain = result.hostname or ''
    if domain != 'localhost' and '.' not in domain:
        return False

    url_lower = url.lower()
    if any(pattern in url_lower for pattern in MALICIOUS_PATTERNS):
        return False

    return True
