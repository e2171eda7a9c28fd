"""
HTTP tests for the analytics endpoints.
"""

import pytest

from conftest import auth_headers, create_url, visit
from shortify.api.analytics import get_analytics_service
from shortify.core.exceptions import StoreError
from shortify.main import app
from shortify.services.analytics_service import AnalyticsService

VIEWS = ["summary", "timeseries", "referrers", "devices", "browsers", "os"]


def analytics_path(slug: str, view: str) -> str:
    return f"/api/urls/{slug}/analytics/{view}"


def test_owner_scenario(client):
    """Owner sees clicks, unique visitors and breakdowns of their slug."""
    created = create_url(client, "https://example.com", caller_id="u1", customSlug="abc123")
    assert created["creatorId"] == "u1"

    for _ in range(3):
        assert visit(client, "abc123", ip="1.1.1.1", user_agent="UA-X").status_code == 302
    for _ in range(2):
        assert visit(client, "abc123", ip="2.2.2.2", user_agent="UA-Y").status_code == 302

    response = client.get(analytics_path("abc123", "summary"), headers=auth_headers("u1"))
    assert response.status_code == 200
    assert response.json() == {"totalClicks": 5, "uniqueVisitors": 2}

    response = client.get(analytics_path("abc123", "summary"), headers=auth_headers("u2"))
    assert response.status_code == 403
    assert "error" in response.json()


def test_views_are_camel_case(client):
    """Analytics payloads use camelCase keys on the wire."""
    create_url(client, caller_id="u1", customSlug="views1")
    visit(client, "views1", referrer="https://news.example")
    visit(client, "views1")
    headers = auth_headers("u1")

    series = client.get(analytics_path("views1", "timeseries"), headers=headers).json()
    assert len(series) == 1
    assert series[0]["count"] == 2
    assert len(series[0]["date"]) == len("YYYY-MM-DD")

    referrers = client.get(analytics_path("views1", "referrers"), headers=headers).json()
    assert referrers == [
        {"referrer": None, "count": 1},
        {"referrer": "https://news.example", "count": 1},
    ]

    devices = client.get(analytics_path("views1", "devices"), headers=headers).json()
    assert devices == [{"deviceType": "desktop", "count": 2}]

    browsers = client.get(analytics_path("views1", "browsers"), headers=headers).json()
    assert browsers == [{"browser": None, "count": 2}]

    systems = client.get(analytics_path("views1", "os"), headers=headers).json()
    assert systems == [{"os": None, "count": 2}]


def test_zero_visits_summary(client):
    """A slug with no visits reports zero clicks and visitors."""
    create_url(client, caller_id="u1", customSlug="fresh1")

    response = client.get(analytics_path("fresh1", "summary"), headers=auth_headers("u1"))

    assert response.json() == {"totalClicks": 0, "uniqueVisitors": 0}


@pytest.mark.parametrize("view", VIEWS)
def test_non_owner_forbidden_for_every_view(client, view):
    """Another caller gets 403 on every view."""
    create_url(client, caller_id="u1", customSlug="guard1")

    response = client.get(analytics_path("guard1", view), headers=auth_headers("u2"))

    assert response.status_code == 403
    assert response.json() == {"error": "You do not have permission to access this URL"}


@pytest.mark.parametrize("view", VIEWS)
def test_anonymous_url_unreachable_for_every_view(client, view):
    """URLs created anonymously have no owner, so nobody reads their analytics."""
    create_url(client, customSlug="anon42")

    response = client.get(analytics_path("anon42", view), headers=auth_headers("u1"))

    assert response.status_code == 403


@pytest.mark.parametrize("view", VIEWS)
def test_unauthenticated_caller(client, view):
    """No token means 401."""
    create_url(client, caller_id="u1", customSlug="guard2")

    response = client.get(analytics_path("guard2", view))

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}


@pytest.mark.parametrize("view", VIEWS)
def test_unknown_slug(client, view):
    """Unknown slugs are 404 on every view."""
    response = client.get(analytics_path("ghost1", view), headers=auth_headers("u1"))

    assert response.status_code == 404
    assert response.json() == {"error": "URL not found"}


def test_invalid_token(client):
    """A bad token on an owner-only route is 401."""
    create_url(client, caller_id="u1", customSlug="guard3")

    response = client.get(
        analytics_path("guard3", "summary"),
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}


def test_token_in_cookie(client):
    """The access_token cookie identifies the caller."""
    create_url(client, caller_id="u1", customSlug="cookie")
    token = auth_headers("u1")["Authorization"].split(" ", 1)[1]
    client.cookies.set("access_token", token)

    response = client.get(analytics_path("cookie", "summary"))

    assert response.status_code == 200


def test_store_failure_is_a_generic_server_error(client):
    """Storage failures surface as a 500 without internal details."""
    create_url(client, caller_id="u1", customSlug="broken")

    class FailingStore:
        async def count_clicks_and_pairs(self, slug):
            raise StoreError("database unavailable")

    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(
        session=None, store=FailingStore()
    )

    response = client.get(analytics_path("broken", "summary"), headers=auth_headers("u1"))

    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
