"""API routes for the incident list view."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from app.models import (
    IncidentItem,
    IncidentListResponse,
    IncidentActionResponse,
    ResolveRequest,
)
from core.errors import (
    AuthError,
    IncidentClientError,
    InvalidTransitionError,
    ReconciliationError,
    UpdateInProgressError,
)
from core.logging import get_logger
from incidents.client import PagerDutyClient
from incidents.formatting import render_incident
from incidents.models import IncidentStatus
from incidents.view import IncidentView, ViewState

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["incidents"])


def get_incident_view(request: Request) -> IncidentView:
    """The process-wide list view, created on first use."""
    view = getattr(request.app.state, "incident_view", None)
    if view is None:
        view = IncidentView()
        request.app.state.incident_view = view
    return view


def get_pagerduty_client(request: Request) -> PagerDutyClient:
    """The shared PagerDuty client, built from settings on first use."""
    client = getattr(request.app.state, "pagerduty_client", None)
    if client is None:
        client = PagerDutyClient.from_settings()
        request.app.state.pagerduty_client = client
    return client


def to_http_exception(error: IncidentClientError) -> HTTPException:
    """Map a client error to the HTTP status shown to the user."""
    if isinstance(error, AuthError):
        status_code = 401
    elif isinstance(error, (InvalidTransitionError, ReconciliationError, UpdateInProgressError)):
        status_code = 409
    else:
        status_code = 502
    return HTTPException(status_code=status_code, detail=error.message)


@router.get("/incidents", response_model=IncidentListResponse)
async def list_incidents(
    status: Optional[IncidentStatus] = Query(default=None, description="Only incidents with this status"),
    refresh: bool = Query(default=False, description="Fetch the list again"),
    view: IncidentView = Depends(get_incident_view),
    client: PagerDutyClient = Depends(get_pagerduty_client),
) -> IncidentListResponse:
    """
    List incidents, newest first.

    The list is fetched on first use and when refresh=true; otherwise the
    in-memory list is served. A failed load is reported as an error, never as
    an empty list.
    """
    if refresh or view.state == ViewState.IDLE:
        try:
            await view.load(client)
        except IncidentClientError as e:
            raise to_http_exception(e)
    elif view.state == ViewState.ERROR:
        raise to_http_exception(view.error)

    incidents = view.filter(status)
    return IncidentListResponse(
        state=view.state.value,
        status_filter=status.value if status else None,
        total=len(incidents),
        incidents=[IncidentItem(**render_incident(incident)) for incident in incidents],
    )


async def _change_status(
    view: IncidentView,
    client: PagerDutyClient,
    incident_id: str,
    target: IncidentStatus,
    note: Optional[str] = None,
) -> IncidentActionResponse:
    try:
        updated = await view.transition(client, incident_id, target, note=note)
    except IncidentClientError as e:
        raise to_http_exception(e)

    logger.info("Incident status changed", incident_id=incident_id, status=updated.status.value)
    return IncidentActionResponse(
        incident=IncidentItem(**render_incident(updated)),
        message=f"Incident #{updated.incident_number} {updated.status.value}",
    )


@router.post("/incidents/{incident_id}/acknowledge", response_model=IncidentActionResponse)
async def acknowledge_incident(
    incident_id: str,
    view: IncidentView = Depends(get_incident_view),
    client: PagerDutyClient = Depends(get_pagerduty_client),
) -> IncidentActionResponse:
    """Acknowledge a triggered incident."""
    return await _change_status(view, client, incident_id, IncidentStatus.ACKNOWLEDGED)


@router.post("/incidents/{incident_id}/resolve", response_model=IncidentActionResponse)
async def resolve_incident(
    incident_id: str,
    request: Optional[ResolveRequest] = None,
    view: IncidentView = Depends(get_incident_view),
    client: PagerDutyClient = Depends(get_pagerduty_client),
) -> IncidentActionResponse:
    """Resolve an incident, optionally adding a resolution note."""
    note = request.note if request else None
    return await _change_status(view, client, incident_id, IncidentStatus.RESOLVED, note=note)
