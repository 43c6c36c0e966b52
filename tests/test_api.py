"""API tests for the incident list endpoints."""
import httpx
import pytest
from fastapi.testclient import TestClient
from app.api.routes import get_incident_view, get_pagerduty_client
from app.main import app
from core.logging import configure_logging, get_logger
from incidents.client import PagerDutyClient
from incidents.view import IncidentView
from tests.pagerduty_fake import API_KEY

configure_logging()
logger = get_logger(__name__)


@pytest.fixture
def api(fake_pagerduty):
    """TestClient wired to the fake PagerDuty API and a fresh view."""
    view = IncidentView()
    client = PagerDutyClient(
        api_key=API_KEY,
        api_url="https://api.pagerduty.com",
        transport=httpx.MockTransport(fake_pagerduty.handler),
    )
    app.dependency_overrides[get_incident_view] = lambda: view
    app.dependency_overrides[get_pagerduty_client] = lambda: client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_list_incidents_renders_items(api, fake_pagerduty):
    """Test GET /api/v1/incidents."""
    logger.info("Testing GET /api/v1/incidents")

    response = api.get("/api/v1/incidents")

    assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"
    data = response.json()
    assert data["state"] == "loaded"
    assert data["total"] == 3
    first = data["incidents"][0]
    assert first["id"] == "PT4KHLK"
    assert first["display_title"] == "#3: Incident PT4KHLK"
    assert first["color"] == "red"
    assert first["actions"] == ["acknowledge", "resolve"]
    assert first["url"] == "https://example.pagerduty.com/incidents/PT4KHLK"
    logger.info(f"✓ Listed {data['total']} incidents")

    # Served from memory until refreshed
    api.get("/api/v1/incidents")
    assert len(fake_pagerduty.requests) == 1
    api.get("/api/v1/incidents?refresh=true")
    assert len(fake_pagerduty.requests) == 2


def test_list_incidents_filters_by_status(api):
    response = api.get("/api/v1/incidents?status=resolved")

    assert response.status_code == 200
    data = response.json()
    assert data["status_filter"] == "resolved"
    assert [item["id"] for item in data["incidents"]] == ["PW1ZL0R"]
    assert data["incidents"][0]["color"] == "green"


def test_list_incidents_rejects_unknown_status_filter(api):
    response = api.get("/api/v1/incidents?status=snoozed")
    assert response.status_code == 422


def test_failed_load_is_an_error_not_an_empty_list(api, fake_pagerduty):
    fake_pagerduty.fail_with = httpx.Response(500, json={"error": {"message": "Internal Error"}})

    response = api.get("/api/v1/incidents")
    assert response.status_code == 502
    assert response.json()["detail"] == "Internal Error (HTTP 500)"

    # Stays in the error state until refreshed
    fake_pagerduty.fail_with = None
    assert api.get("/api/v1/incidents").status_code == 502
    assert api.get("/api/v1/incidents?refresh=true").status_code == 200


def test_missing_credential_is_401(fake_pagerduty):
    app.dependency_overrides[get_incident_view] = IncidentView
    app.dependency_overrides[get_pagerduty_client] = lambda: PagerDutyClient(api_key="")
    try:
        response = TestClient(app).get("/api/v1/incidents")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.json()["detail"] == "PagerDuty API key is not configured"


def test_acknowledge_then_list(api, fake_pagerduty):
    api.get("/api/v1/incidents")

    response = api.post("/api/v1/incidents/PT4KHLK/acknowledge")

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["incident"]["status"] == "acknowledged"
    assert data["incident"]["color"] == "yellow"
    assert data["incident"]["actions"] == ["resolve"]
    assert data["message"] == "Incident #3 acknowledged"

    listed = api.get("/api/v1/incidents").json()
    assert listed["incidents"][0]["status"] == "acknowledged"
    assert len(fake_pagerduty.puts) == 1


def test_resolve_with_note(api, fake_pagerduty):
    api.get("/api/v1/incidents")

    response = api.post("/api/v1/incidents/PQ8XJ2C/resolve", json={"note": "Rolled back deploy"})

    assert response.status_code == 200, response.text
    assert response.json()["incident"]["status"] == "resolved"
    assert fake_pagerduty.notes["PQ8XJ2C"] == ["Rolled back deploy"]


def test_resolve_without_body(api, fake_pagerduty):
    api.get("/api/v1/incidents")

    response = api.post("/api/v1/incidents/PT4KHLK/resolve")

    assert response.status_code == 200, response.text
    assert "PT4KHLK" not in fake_pagerduty.notes


def test_invalid_transition_is_409(api, fake_pagerduty):
    api.get("/api/v1/incidents")

    response = api.post("/api/v1/incidents/PW1ZL0R/acknowledge")

    assert response.status_code == 409
    assert "already resolved" in response.json()["detail"]
    assert fake_pagerduty.puts == []


def test_unknown_incident_is_502(api):
    api.get("/api/v1/incidents")

    response = api.post("/api/v1/incidents/unknown-id/resolve")

    assert response.status_code == 502
    assert "Not Found" in response.json()["detail"]


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "pagerduty" in data["services"]
