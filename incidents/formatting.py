"""Rendering helpers for the incident list view."""
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from zoneinfo import ZoneInfo
from core.config import settings
from incidents.models import Incident, IncidentStatus
from incidents.transitions import available_actions

STATUS_COLORS: Dict[IncidentStatus, str] = {
    IncidentStatus.RESOLVED: "green",
    IncidentStatus.ACKNOWLEDGED: "yellow",
    IncidentStatus.TRIGGERED: "red",
}


def format_timestamp(
    value: datetime,
    tz_name: Optional[str] = None,
    fmt: Optional[str] = None,
) -> str:
    """
    Render a timestamp in the display time zone.

    The default pattern uses a 12-hour hour field (yyyy/MM/dd hh:mm:ss), so
    15:04 renders as 03:04 without an AM/PM marker.

    Args:
        value: Timestamp; naive values are taken as UTC
        tz_name: IANA zone (defaults to settings.display_timezone)
        fmt: strftime pattern (defaults to settings.timestamp_format)
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(ZoneInfo(tz_name or settings.display_timezone))
    return local.strftime(fmt or settings.timestamp_format)


def list_item_title(incident: Incident) -> str:
    return f"#{incident.incident_number}: {incident.title}"


def render_incident(incident: Incident) -> Dict[str, Any]:
    """Build the list item shown for one incident."""
    return {
        **incident.to_dict(),
        "display_title": list_item_title(incident),
        "created_at_display": format_timestamp(incident.created_at),
        "color": STATUS_COLORS[incident.status],
        "actions": available_actions(incident.status),
    }
