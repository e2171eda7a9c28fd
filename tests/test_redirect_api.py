"""
HTTP tests for the redirect path.
"""

import logging

from conftest import auth_headers, create_url, visit
from shortify.services import background_tasks


def summary(client, slug, caller_id="u1"):
    return client.get(f"/api/urls/{slug}/analytics/summary", headers=auth_headers(caller_id)).json()


def test_redirects_and_records_visit(client):
    """Redirect returns 302 and records the visit with parsed client facts."""
    create_url(client, "https://example.com/landing", caller_id="u1", customSlug="go1234")

    response = visit(client, "go1234", ip="3.3.3.3, 10.0.0.1", referrer="https://search.example")

    assert response.status_code == 302
    assert response.headers["location"] == "https://example.com/landing"
    assert summary(client, "go1234") == {"totalClicks": 1, "uniqueVisitors": 1}

    referrers = client.get(
        "/api/urls/go1234/analytics/referrers", headers=auth_headers("u1")
    ).json()
    assert referrers == [{"referrer": "https://search.example", "count": 1}]


def test_unknown_slug(client):
    """Unknown slugs are 404."""
    response = client.get("/nothere", follow_redirects=False)

    assert response.status_code == 404
    assert response.json() == {"error": "URL not found"}


def test_expired_url_is_gone_and_not_recorded(client):
    """Expired URLs are 410 and leave no visit behind."""
    create_url(client, caller_id="u1", customSlug="past01", expiresAt="2000-01-01T00:00:00Z")

    response = visit(client, "past01")

    assert response.status_code == 410
    assert response.json() == {"error": "URL has expired"}
    assert summary(client, "past01")["totalClicks"] == 0


def test_disabled_url_is_gone(client):
    """Disabled URLs are 410."""
    create_url(client, caller_id="u1", customSlug="off123", expiresAt="2999-01-01T00:00:00Z")
    client.patch("/api/urls/off123", json={"disabled": True}, headers=auth_headers("u1"))

    response = visit(client, "off123")

    assert response.status_code == 410
    assert response.json() == {"error": "URL is disabled"}


def test_visit_failure_does_not_break_redirect(client, monkeypatch, caplog):
    """A failed visit write is logged and the redirect still happens."""
    create_url(client, caller_id="u1", customSlug="flaky1")

    async def explode(self, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(background_tasks.VisitLoggerService, "log_visit", explode)

    with caplog.at_level(logging.ERROR, logger="shortify.services.background_tasks"):
        response = visit(client, "flaky1")

    assert response.status_code == 302
    assert "Failed to log visit for flaky1" in caplog.text
    monkeypatch.undo()
    assert summary(client, "flaky1")["totalClicks"] == 0


def test_health_routes_are_not_slugs(client):
    """Health routes win over the slug catch-all."""
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200
