"""
Custom Exceptions

This module defines the error taxonomy of the service.

Every exception carries the HTTP status code and the public message it is
rendered with, so a single exception handler in main.py can translate
them into `{"error": "..."}` responses.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for the shortify service."""

    status_code = 500
    public_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.public_message = message
        super().__init__(self.public_message)


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    status_code = 400

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class InvalidSlugError(URLShortenerException):
    """Raised when a custom slug has an unsupported format."""

    status_code = 400

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(
            "Slugs may only contain letters, digits, '-' and '_' (max 32 characters)"
        )


class SlugConflictError(URLShortenerException):
    """Raised when a custom slug is already taken."""

    status_code = 400

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("Slug already exists")


class SlugNotFoundError(URLShortenerException):
    """Raised when no URL exists for a slug."""

    status_code = 404

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("URL not found")


class URLGoneError(URLShortenerException):
    """Raised when a URL exists but can no longer be followed."""

    status_code = 410

    def __init__(self, slug: str, reason: str):
        self.slug = slug
        self.reason = reason
        super().__init__(reason)


class UnauthenticatedError(URLShortenerException):
    """Raised when an operation needs a caller identity and has none."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(URLShortenerException):
    """Raised when the caller is not the recorded creator of a URL."""

    status_code = 403

    def __init__(self, slug: str, message: str = "You do not have permission to access this URL"):
        self.slug = slug
        super().__init__(message)


class NoOwnerError(ForbiddenError):
    """Raised for anonymously created URLs, which nobody may manage."""

    def __init__(self, slug: str):
        super().__init__(slug, "This URL was created anonymously and has no owner")


class StoreError(URLShortenerException):
    """Raised when the underlying persistence layer fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        self.detail = f"Store error: {message}"
        super().__init__()

    def __str__(self) -> str:
        return self.detail
