from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from conftest import CHROME_WINDOWS, GOOGLEBOT, SAFARI_IPHONE


def create_link(client: TestClient, url: str = "https://www.github.com/", **extra) -> dict:
    response = client.post("/api/v1/links/", json={"original_url": url, **extra})
    assert response.status_code == 201
    return response.json()


def visit(client: TestClient, short_code: str, ip: str = "1.1.1.1", user_agent: str = CHROME_WINDOWS, **kwargs):
    headers = {"x-forwarded-for": ip, "user-agent": user_agent}
    headers.update(kwargs.pop("headers", {}))
    return client.get(f"/{short_code}", headers=headers, follow_redirects=False, **kwargs)


class TestLinks:
    """Test link management endpoints"""

    def test_create_link(self, client: TestClient):
        data = create_link(client)

        assert data["original_url"] == "https://www.github.com/"
        assert data["is_active"] is True
        assert data["short_url"].endswith(f"/{data['short_code']}")

    def test_create_with_custom_code(self, client: TestClient):
        data = create_link(client, custom_code="launch")
        assert data["short_code"] == "launch"

    def test_custom_code_conflict(self, client: TestClient):
        create_link(client, custom_code="launch")

        response = client.post("/api/v1/links/", json={"original_url": "https://example.com/x", "custom_code": "launch"})

        assert response.status_code == 409
        assert response.json()["detail"] == "Custom short code already exists"

    def test_invalid_custom_code(self, client: TestClient):
        response = client.post("/api/v1/links/", json={"original_url": "https://example.com/x", "custom_code": "no-dash"})
        assert response.status_code == 422

    def test_invalid_url(self, client: TestClient):
        response = client.post("/api/v1/links/", json={"original_url": "not-a-valid-url"})
        assert response.status_code == 422

    def test_get_and_list(self, client: TestClient):
        first = create_link(client, "https://example.com/one")
        second = create_link(client, "https://example.com/two")

        assert client.get(f"/api/v1/links/{first['short_code']}").json()["id"] == first["id"]
        listed = [link["short_code"] for link in client.get("/api/v1/links/").json()]
        assert listed == [second["short_code"], first["short_code"]]

    def test_get_missing_link(self, client: TestClient):
        assert client.get("/api/v1/links/nonexistent").status_code == 404

    def test_delete_missing_link(self, client: TestClient):
        assert client.delete("/api/v1/links/nonexistent").status_code == 404


class TestRedirect:
    """Test the visit path: record then redirect"""

    def test_redirect(self, client: TestClient):
        link = create_link(client)

        response = visit(client, link["short_code"])

        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_missing_link(self, client: TestClient):
        response = visit(client, "nonexistent")

        assert response.status_code == 404
        assert response.json()["detail"] == "Link not found or inactive"

    def test_redirect_expired_link(self, client: TestClient):
        expired = (datetime.now(timezone.utc) - timedelta(minutes=5)).isoformat()
        link = create_link(client, expires_at=expired)

        response = visit(client, link["short_code"])

        assert response.status_code == 403
        assert response.json()["detail"] == "Link has expired"

    def test_redirect_after_deactivation(self, client: TestClient):
        link = create_link(client)
        assert visit(client, link["short_code"]).status_code == 302

        assert client.delete(f"/api/v1/links/{link['short_code']}").status_code == 204

        assert visit(client, link["short_code"]).status_code == 404

    def test_redirect_records_clicks(self, client: TestClient):
        link = create_link(client)
        code = link["short_code"]

        visit(client, code, ip="1.1.1.1")
        visit(client, code, ip="1.1.1.1", params={"utm_source": "newsletter"})
        visit(client, code, ip="2.2.2.2", user_agent=SAFARI_IPHONE, headers={"referer": "https://t.co/abc"})
        visit(client, code, ip="3.3.3.3", user_agent=GOOGLEBOT)

        response = client.get(f"/api/v1/analytics/{link['id']}/overview", params={"period": "all"})
        assert response.status_code == 200

        data = response.json()
        assert data["total_clicks"] == 3
        assert data["unique_clicks"] == 2
        assert data["top_countries"] == [{"value": "US", "clicks": 2}, {"value": "CA", "clicks": 1}]
        assert data["top_devices"] == [{"value": "Desktop", "clicks": 2}, {"value": "Mobile", "clicks": 1}]
        assert data["top_referrers"] == [{"value": "https://t.co/abc", "clicks": 1}]


class TestAnalyticsEndpoints:
    """Test record, overview, time series and breakdown endpoints"""

    def test_record(self, client: TestClient):
        link = create_link(client, "https://example.com/landing?ref=1")

        response = client.post("/api/v1/analytics/record", json={
            "short_code": link["short_code"],
            "ip": "2.2.2.2",
            "user_agent": SAFARI_IPHONE,
            "utm_campaign": "spring",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["redirect_url"] == "https://example.com/landing?ref=1"
        assert data["analytics_id"]

    def test_record_unknown_link(self, client: TestClient):
        response = client.post("/api/v1/analytics/record", json={
            "short_code": "nonexistent", "ip": "1.1.1.1", "user_agent": CHROME_WINDOWS,
        })
        assert response.status_code == 404

    def test_record_unknown_ip_still_succeeds(self, client: TestClient):
        link = create_link(client)

        response = client.post("/api/v1/analytics/record", json={
            "short_code": link["short_code"], "ip": "203.0.113.9", "user_agent": CHROME_WINDOWS,
        })

        assert response.status_code == 201
        overview = client.get(f"/api/v1/analytics/{link['id']}/overview?period=all").json()
        assert overview["total_clicks"] == 1
        assert overview["top_countries"] == []

    def test_record_requires_short_code(self, client: TestClient):
        response = client.post("/api/v1/analytics/record", json={
            "short_code": "", "ip": "1.1.1.1", "user_agent": CHROME_WINDOWS,
        })
        assert response.status_code == 422

    def test_overview_for_unknown_link(self, client: TestClient):
        response = client.get("/api/v1/analytics/999/overview")

        assert response.status_code == 200
        assert response.json()["total_clicks"] == 0

    def test_invalid_period(self, client: TestClient):
        assert client.get("/api/v1/analytics/1/overview?period=2w").status_code == 422

    def test_timeseries(self, client: TestClient):
        link = create_link(client)
        visit(client, link["short_code"], ip="1.1.1.1")
        visit(client, link["short_code"], ip="2.2.2.2")

        response = client.get(f"/api/v1/analytics/{link['id']}/timeseries", params={"group_by": "month"})

        assert response.status_code == 200
        points = response.json()
        assert len(points) == 1
        assert points[0]["clicks"] == 2
        assert points[0]["unique_clicks"] == 2

    def test_timeseries_invalid_grouping(self, client: TestClient):
        assert client.get("/api/v1/analytics/1/timeseries?group_by=year").status_code == 422

    def test_breakdown(self, client: TestClient):
        link = create_link(client)
        visit(client, link["short_code"], user_agent=CHROME_WINDOWS)
        visit(client, link["short_code"], user_agent=SAFARI_IPHONE)
        visit(client, link["short_code"], user_agent=CHROME_WINDOWS)

        response = client.get(f"/api/v1/analytics/{link['id']}/breakdown/browser")

        assert response.status_code == 200
        rows = response.json()
        assert rows[0] == {"value": "Chrome", "clicks": 2}
        assert len(rows) == 2

    def test_breakdown_invalid_dimension(self, client: TestClient):
        assert client.get("/api/v1/analytics/1/breakdown/ip").status_code == 422


class TestHealth:

    def test_root(self, client: TestClient):
        assert client.get("/").json()["docs"] == "/docs"

    def test_health(self, client: TestClient):
        assert client.get("/health").json()["status"] == "healthy"


class TestLinkDetails:
    """Test title, description and click counts on link responses"""

    def test_title_and_description(self, client: TestClient):
        data = create_link(client, "https://example.com/docs", title="Docs", description="Product documentation")

        assert data["title"] == "Docs"
        assert data["description"] == "Product documentation"
        assert data["clicks"] == 0

        fetched = client.get(f"/api/v1/links/{data['short_code']}").json()
        assert (fetched["title"], fetched["description"]) == ("Docs", "Product documentation")

    def test_optional_fields_default_to_none(self, client: TestClient):
        data = create_link(client)
        assert data["title"] is None
        assert data["description"] is None

    def test_click_count_after_redirects(self, client: TestClient):
        link = create_link(client)
        other = create_link(client, "https://example.com/other")
        visit(client, link["short_code"], ip="1.1.1.1")
        visit(client, link["short_code"], ip="2.2.2.2")
        visit(client, link["short_code"], ip="3.3.3.3", user_agent=GOOGLEBOT)

        fetched = client.get(f"/api/v1/links/{link['short_code']}").json()
        assert fetched["clicks"] == 2

        listed = {item["short_code"]: item["clicks"] for item in client.get("/api/v1/links/").json()}
        assert listed == {link["short_code"]: 2, other["short_code"]: 0}

    def test_click_count_matches_overview_total(self, client: TestClient):
        link = create_link(client)
        for ip in ("1.1.1.1", "1.1.1.1", "2.2.2.2"):
            visit(client, link["short_code"], ip=ip)

        overview = client.get(f"/api/v1/analytics/{link['id']}/overview?period=all").json()
        fetched = client.get(f"/api/v1/links/{link['short_code']}").json()
        assert fetched["clicks"] == overview["total_clicks"] == 3
