"""Incident schema shared by the client, the view state and the API."""
from typing import Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
from enum import Enum


class IncidentStatus(str, Enum):
    """Incident lifecycle stage."""
    TRIGGERED = "triggered"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class Urgency(str, Enum):
    """Incident urgency (informational only)."""
    HIGH = "high"
    LOW = "low"


class IncidentParseError(ValueError):
    """Raised when an API payload cannot be turned into an Incident."""


@dataclass(frozen=True)
class Incident:
    """A PagerDuty incident as displayed in the list."""
    id: str
    status: IncidentStatus
    title: str
    summary: str
    incident_number: int
    created_at: datetime
    urgency: Urgency
    url: str

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Incident":
        """
        Build an Incident from a PagerDuty incident object.

        Args:
            payload: Incident object as returned by the REST API

        Returns:
            Incident

        Raises:
            IncidentParseError: If a required field is missing or invalid
        """
        if not isinstance(payload, dict):
            raise IncidentParseError(f"Expected an incident object, got {type(payload).__name__}")

        missing = [
            key for key in ("id", "status", "incident_number", "created_at")
            if payload.get(key) in (None, "")
        ]
        if missing:
            raise IncidentParseError(f"Incident payload missing fields: {', '.join(missing)}")

        try:
            status = IncidentStatus(payload["status"])
        except ValueError:
            raise IncidentParseError(f"Unknown incident status '{payload['status']}'") from None

        try:
            urgency = Urgency(payload.get("urgency") or Urgency.HIGH.value)
        except ValueError:
            raise IncidentParseError(f"Unknown incident urgency '{payload['urgency']}'") from None

        try:
            incident_number = int(payload["incident_number"])
            created_at = datetime.fromisoformat(str(payload["created_at"]).replace("Z", "+00:00"))
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
        except (TypeError, ValueError) as e:
            raise IncidentParseError(f"Invalid incident payload: {e}") from None

        title = payload.get("title") or payload.get("summary") or ""
        summary = payload.get("summary") or title

        return cls(
            id=str(payload["id"]),
            status=status,
            title=title,
            summary=summary,
            incident_number=incident_number,
            created_at=created_at,
            urgency=urgency,
            url=payload.get("html_url") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert incident to dictionary."""
        return {
            "id": self.id,
            "status": self.status.value,
            "title": self.title,
            "summary": self.summary,
            "incident_number": self.incident_number,
            "created_at": self.created_at.isoformat(),
            "urgency": self.urgency.value,
            "url": self.url,
        }
