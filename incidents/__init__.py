"""PagerDuty incident client, transition rules and list view state."""
from .models import Incident, IncidentStatus, Urgency
from .client import PagerDutyClient
from .view import IncidentView, ViewState

__all__ = [
    "Incident",
    "IncidentStatus",
    "Urgency",
    "PagerDutyClient",
    "IncidentView",
    "ViewState",
]
