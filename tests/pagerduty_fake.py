"""In-memory PagerDuty incidents API served through httpx.MockTransport."""
import json
import re
from typing import Any, Dict, List, Optional
import httpx

API_KEY = "test-key"

INCIDENT_PATH = re.compile(r"^/incidents/([^/]+)$")


def make_incident(
    incident_id: str,
    status: str = "triggered",
    number: int = 1,
    created_at: str = "2024-01-05T03:04:05Z",
    **overrides: Any
) -> Dict[str, Any]:
    payload = {
        "id": incident_id,
        "type": "incident",
        "status": status,
        "title": f"Incident {incident_id}",
        "summary": f"[#{number}] Incident {incident_id}",
        "incident_number": number,
        "created_at": created_at,
        "urgency": "high",
        "html_url": f"https://example.pagerduty.com/incidents/{incident_id}",
    }
    payload.update(overrides)
    return payload


class FakePagerDuty:
    """Minimal PagerDuty incidents API. Does not enforce transitions."""

    def __init__(self, incidents: List[Dict[str, Any]]):
        self.incidents = [dict(item) for item in incidents]
        self.requests: List[httpx.Request] = []
        self.notes: Dict[str, List[str]] = {}
        self.fail_with: Optional[httpx.Response] = None

    def find(self, incident_id: str) -> Optional[Dict[str, Any]]:
        for item in self.incidents:
            if item["id"] == incident_id:
                return item
        return None

    @property
    def puts(self) -> List[httpx.Request]:
        return [request for request in self.requests if request.method == "PUT"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("Authorization") != f"Token token={API_KEY}":
            return httpx.Response(401, json={"error": {"message": "Unauthorized", "code": 2006}})

        if self.fail_with is not None:
            return self.fail_with

        if request.method == "GET" and request.url.path == "/incidents":
            return httpx.Response(200, json={"incidents": self.incidents, "limit": 25, "more": False})

        match = INCIDENT_PATH.match(request.url.path)
        if request.method == "PUT" and match:
            incident = self.find(match.group(1))
            if incident is None:
                return httpx.Response(404, json={"error": {"message": "Not Found", "code": 2100}})
            body = json.loads(request.content)["incident"]
            incident["status"] = body["status"]
            if "note" in body:
                self.notes.setdefault(incident["id"], []).append(body["note"])
            return httpx.Response(200, json={"incident": incident})

        return httpx.Response(404, json={"error": {"message": "Not Found", "code": 2100}})

