"""Error taxonomy for the PagerDuty incident client.

Every error is terminal for the operation that raised it and its ``str()`` is a
single line suitable for a user notification.
"""
from typing import Optional


class IncidentClientError(Exception):
    """Base class for all incident client errors."""

    def __init__(self, message: str):
        # Notifications are one line
        self.message = " ".join(str(message).split()) or self.__class__.__name__
        super().__init__(self.message)


class FetchError(IncidentClientError):
    """Incident list retrieval failed. Callers treat this as nothing loaded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpdateError(IncidentClientError):
    """Incident status change failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(FetchError, UpdateError):
    """Missing or rejected PagerDuty credential."""

    def __init__(self, message: str = "PagerDuty API key is not configured", status_code: Optional[int] = None):
        IncidentClientError.__init__(self, message)
        self.status_code = status_code


class InvalidTransitionError(IncidentClientError):
    """Requested status is not reachable from the incident's current status."""

    def __init__(self, current: Optional[str], target: str, message: Optional[str] = None):
        self.current = current
        self.target = target
        super().__init__(
            message or f"Cannot change incident status from '{current}' to '{target}'"
        )


class ReconciliationError(IncidentClientError):
    """An updated incident does not match any incident in the displayed list."""

    def __init__(self, incident_id: str, message: Optional[str] = None):
        self.incident_id = incident_id
        super().__init__(
            message or f"Incident '{incident_id}' is not in the loaded list; refresh and try again"
        )


class UpdateInProgressError(UpdateError):
    """Another status change for the same incident has not finished yet."""

    def __init__(self, incident_id: str):
        self.incident_id = incident_id
        super().__init__(f"An update for incident {incident_id} is already in progress")
