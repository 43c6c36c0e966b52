"""PagerDuty REST client: list incidents and change an incident's status."""
import httpx
from typing import List, Dict, Any, Optional, Union
from core.config import settings
from core.errors import (
    AuthError,
    FetchError,
    InvalidTransitionError,
    ReconciliationError,
    UpdateError,
)
from core.logging import get_logger
from incidents.models import Incident, IncidentStatus
from incidents.transitions import coerce_status, ensure_transition

logger = get_logger(__name__)

PAGERDUTY_ACCEPT = "application/vnd.pagerduty+json;version=2"


def _error_message(response: httpx.Response) -> str:
    """Extract PagerDuty's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        message = error.get("message") or response.reason_phrase
        details = [str(item) for item in error.get("errors") or []]
        if details:
            message = f"{message}: {'; '.join(details)}"
        return f"{message} (HTTP {response.status_code})"

    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class PagerDutyClient:
    """
    Stateless client for the PagerDuty incidents API.

    The API key is fixed at construction; the client holds no incident state.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize PagerDuty client.

        Args:
            api_key: PagerDuty REST API key (blank keys fail every call with AuthError)
            api_url: API base URL (defaults to settings.pagerduty_api_url)
            timeout: Per-request timeout in seconds (defaults to settings)
            transport: Optional httpx transport, used to stub the API in tests
        """
        self.api_key = (api_key or "").strip()
        self.api_url = (api_url or settings.pagerduty_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds

        self.client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Accept": PAGERDUTY_ACCEPT,
                "Content-Type": "application/json",
                **({"Authorization": f"Token token={self.api_key}"} if self.api_key else {})
            },
            timeout=self.timeout,
            transport=transport,
        )

        logger.info(
            "PagerDuty client initialized",
            api_url=self.api_url,
            credential_configured=bool(self.api_key)
        )

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "PagerDutyClient":
        """Build a client from the global settings."""
        return cls(
            api_key=settings.get_secret_value(settings.pagerduty_api_key),
            api_url=settings.pagerduty_api_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    def _require_credentials(self, operation: str) -> None:
        if not self.api_key:
            logger.warning("PagerDuty API key missing", operation=operation)
            raise AuthError()

    async def fetch_incidents(self) -> List[Incident]:
        """
        Fetch incidents, newest first.

        Only the first page returned by the server is read; order is kept as returned.

        Returns:
            List of incidents

        Raises:
            AuthError: If the API key is blank or rejected
            FetchError: On transport failure, timeout, non-2xx or malformed body
        """
        self._require_credentials("fetch_incidents")
        logger.info("Fetching incidents")

        try:
            response = await self.client.get(
                "/incidents",
                params={"sort_by": "created_at:desc"}
            )
        except httpx.TimeoutException as e:
            logger.warning("Incident fetch timed out", error=str(e))
            raise FetchError(f"Timed out after {self.timeout:g}s fetching incidents") from e
        except httpx.HTTPError as e:
            logger.warning("Incident fetch failed", error=str(e))
            raise FetchError(f"Failed to fetch incidents: {e}") from e

        if response.status_code in (401, 403):
            message = _error_message(response)
            logger.warning("PagerDuty rejected credentials", status_code=response.status_code)
            raise AuthError(message, status_code=response.status_code)
        if response.is_error:
            message = _error_message(response)
            logger.warning("Incident fetch failed", status_code=response.status_code, error=message)
            raise FetchError(message, status_code=response.status_code)

        try:
            data = response.json()
            incidents = [Incident.from_api(item) for item in data["incidents"]]
        except (ValueError, KeyError, TypeError) as e:
            # IncidentParseError is a ValueError
            logger.warning("Malformed incident list", error=str(e))
            raise FetchError(f"Malformed incident list: {e}") from e

        logger.info("Incidents fetched", count=len(incidents))
        return incidents

    async def update_status(
        self,
        incident: Union[str, Incident],
        target_status: Union[str, IncidentStatus],
        note: Optional[str] = None,
        current_status: Optional[Union[str, IncidentStatus]] = None,
    ) -> Incident:
        """
        Move an incident to target_status.

        When the current status is known (an Incident is passed, or current_status
        is given) the transition table is checked before any request is sent.

        Args:
            incident: Incident or incident id
            target_status: "acknowledged" or "resolved"
            note: Resolution note, only sent when resolving
            current_status: Known current status for the local precondition

        Returns:
            The server's updated incident

        Raises:
            InvalidTransitionError: If the move is not allowed from the current status
            AuthError: If the API key is blank or rejected
            UpdateError: On transport failure, timeout, non-2xx (404 included) or malformed body
            ReconciliationError: If the server answers with a different incident
        """
        if isinstance(incident, Incident):
            incident_id = incident.id
            current_status = current_status or incident.status
        else:
            incident_id = incident

        if current_status is not None:
            target = ensure_transition(current_status, target_status)
        else:
            target = coerce_status(target_status)
            if target == IncidentStatus.TRIGGERED:
                raise InvalidTransitionError(
                    None,
                    target.value,
                    message="Incidents cannot be moved back to triggered"
                )

        self._require_credentials("update_status")

        body: Dict[str, Any] = {"type": "incident", "status": target.value}
        if note and note.strip():
            if target == IncidentStatus.RESOLVED:
                body["note"] = note.strip()
            else:
                logger.warning(
                    "Ignoring note on non-resolve transition",
                    incident_id=incident_id,
                    status=target.value
                )

        logger.info("Updating incident status", incident_id=incident_id, status=target.value)

        try:
            response = await self.client.put(
                f"/incidents/{incident_id}",
                json={"incident": body}
            )
        except httpx.TimeoutException as e:
            logger.warning("Incident update timed out", incident_id=incident_id, error=str(e))
            raise UpdateError(f"Timed out after {self.timeout:g}s updating incident {incident_id}") from e
        except httpx.HTTPError as e:
            logger.warning("Incident update failed", incident_id=incident_id, error=str(e))
            raise UpdateError(f"Failed to update incident {incident_id}: {e}") from e

        if response.status_code in (401, 403):
            message = _error_message(response)
            logger.warning("PagerDuty rejected credentials", status_code=response.status_code)
            raise AuthError(message, status_code=response.status_code)
        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "Incident update failed",
                incident_id=incident_id,
                status_code=response.status_code,
                error=message
            )
            raise UpdateError(message, status_code=response.status_code)

        try:
            updated = Incident.from_api(response.json()["incident"])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Malformed incident update response", incident_id=incident_id, error=str(e))
            raise UpdateError(f"Malformed response updating incident {incident_id}: {e}") from e

        if updated.id != incident_id:
            logger.warning(
                "Update response for a different incident",
                incident_id=incident_id,
                response_id=updated.id
            )
            raise ReconciliationError(
                updated.id,
                message=f"Server returned incident '{updated.id}' when updating '{incident_id}'"
            )

        logger.info("Incident status updated", incident_id=updated.id, status=updated.status.value)
        return updated

    async def acknowledge(self, incident: Union[str, Incident]) -> Incident:
        return await self.update_status(incident, IncidentStatus.ACKNOWLEDGED)

    async def resolve(self, incident: Union[str, Incident], note: Optional[str] = None) -> Incident:
        return await self.update_status(incident, IncidentStatus.RESOLVED, note=note)

    async def aclose(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

