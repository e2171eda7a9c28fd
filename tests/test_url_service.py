"""
Tests for the URL directory service and input validators.
"""

from datetime import datetime, timezone

import pytest

from shortify.core.exceptions import InvalidSlugError, InvalidURLError, SlugConflictError
from shortify.core.validators import is_valid_url, sanitize_slug
from shortify.db.models import as_utc
from shortify.services import url_service
from shortify.services.url_service import BASE62_CHARS, UNSET, URLDirectoryService, generate_slug


class TestSlugGeneration:
    """Test random slug generation."""

    def test_default_length(self):
        """Generated slugs use the configured length."""
        assert len(generate_slug()) == 7

    def test_alphabet(self):
        """Generated slugs only use base62 characters."""
        for _ in range(50):
            slug = generate_slug(12)
            assert len(slug) == 12
            assert set(slug) <= set(BASE62_CHARS)


class TestSlugSanitization:

    def test_valid_slugs(self):
        """Valid slugs are trimmed and kept."""
        assert sanitize_slug("abc123") == "abc123"
        assert sanitize_slug("  my-link_2 ") == "my-link_2"

    def test_invalid_slugs(self):
        """Unsupported slugs are rejected."""
        for slug in ["", "   ", "a/b", "../x", "has space", "x" * 33, None]:
            assert sanitize_slug(slug) is None, f"Should be invalid: {slug!r}"


class TestURLValidation:
    """Test URL validation function."""

    def test_valid_urls(self):
        """Well-formed http(s) URLs pass."""
        valid_urls = [
            "http://example.com",
            "https://example.com",
            "https://www.example.com/path/to/page",
            "http://subdomain.example.com:8080/path?query=value",
            "http://localhost:3000/dashboard",
        ]
        for url in valid_urls:
            assert is_valid_url(url), f"Should be valid: {url}"

    def test_invalid_urls(self):
        """Other schemes, bare hosts and overlong URLs fail."""
        invalid_urls = [
            "not-a-url",
            "ftp://example.com",  # FTP not supported
            "example.com",  # Missing scheme
            "",
            "http://",  # Missing domain
            "https://example.com/" + "a" * 2048,
        ]
        for url in invalid_urls:
            assert not is_valid_url(url), f"Should be invalid: {url}"


class TestURLDirectory:

    @pytest.mark.asyncio
    async def test_create_and_find(self, session):
        """A created URL can be found by slug."""
        directory = URLDirectoryService(session)
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)

        created = await directory.create_url(
            "https://example.com/docs", creator_id="u1", title="Docs", expires_at=expires
        )
        found = await directory.find_by_slug(created.slug)

        assert found is not None
        assert found.long_url == "https://example.com/docs"
        assert found.creator_id == "u1"
        assert found.disabled is False
        assert as_utc(found.expires_at) == expires

    @pytest.mark.asyncio
    async def test_find_missing(self, session):
        """Unknown slugs return None."""
        assert await URLDirectoryService(session).find_by_slug("absent") is None

    @pytest.mark.asyncio
    async def test_invalid_url(self, session):
        """Invalid targets are rejected."""
        with pytest.raises(InvalidURLError):
            await URLDirectoryService(session).create_url("file:///etc/passwd")

    @pytest.mark.asyncio
    async def test_custom_slug_rules(self, session):
        """Custom slugs must be unique and well formed."""
        directory = URLDirectoryService(session)
        await directory.create_url("https://example.com", custom_slug="promo")

        with pytest.raises(SlugConflictError):
            await directory.create_url("https://example.org", custom_slug="promo")
        with pytest.raises(InvalidSlugError):
            await directory.create_url("https://example.org", custom_slug="bad slug!")

    @pytest.mark.asyncio
    async def test_generated_slug_collision_is_retried(self, session, monkeypatch):
        """A taken generated slug is replaced by a fresh one."""
        directory = URLDirectoryService(session)
        await directory.create_url("https://example.com", custom_slug="AAAAAAA")

        candidates = iter(["AAAAAAA", "BBBBBBB"])
        monkeypatch.setattr(url_service, "generate_slug", lambda: next(candidates))

        created = await directory.create_url("https://example.org")

        assert created.slug == "BBBBBBB"

    @pytest.mark.asyncio
    async def test_update_lifecycle(self, session):
        """Only supplied fields change; None clears the expiry."""
        directory = URLDirectoryService(session)
        url = await directory.create_url(
            "https://example.com",
            creator_id="u1",
            expires_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
        )

        url = await directory.update_lifecycle(url, disabled=True)
        assert url.disabled is True
        assert url.expires_at is not None

        url = await directory.update_lifecycle(url, disabled=UNSET, expires_at=None)
        assert url.disabled is True
        assert url.expires_at is None
