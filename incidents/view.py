"""Caller-owned incident list state.

The list view owns one IncidentView. It is rebuilt on every load and patched
in place only after the server confirms an update; the client never touches it.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Set, Union

from core.errors import FetchError, ReconciliationError, UpdateInProgressError
from core.logging import get_logger
from incidents.client import PagerDutyClient
from incidents.models import Incident, IncidentStatus
from incidents.transitions import available_actions

logger = get_logger(__name__)


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class IncidentView:
    """In-memory incident list plus its load/error state."""

    def __init__(self) -> None:
        self.items: Optional[List[Incident]] = None
        self.error: Optional[FetchError] = None
        self._pending: Set[str] = set()
        self._load_seq = 0
        self._loads_in_flight = 0

    @property
    def is_loading(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def state(self) -> ViewState:
        if self.is_loading:
            return ViewState.LOADING
        if self.error is not None:
            return ViewState.ERROR
        if self.items is not None:
            return ViewState.LOADED
        return ViewState.IDLE

    @property
    def pending(self) -> Set[str]:
        """Ids with an update in flight."""
        return set(self._pending)

    async def load(self, client: PagerDutyClient) -> List[Incident]:
        """
        Replace the list with a fresh fetch.

        On failure the list is cleared and the error kept, so an empty result
        and a failed load stay distinguishable. The error is re-raised.

        When loads overlap only the most recently started one updates the
        view; an older load that finishes later leaves it untouched.
        """
        self._load_seq += 1
        seq = self._load_seq
        self._loads_in_flight += 1
        try:
            incidents = await client.fetch_incidents()
        except FetchError as e:
            if seq == self._load_seq:
                self.items = None
                self.error = e
            else:
                logger.info("Ignoring failure of superseded load", error=e.message)
            raise
        finally:
            self._loads_in_flight -= 1

        if seq != self._load_seq:
            logger.info("Ignoring result of superseded load", count=len(incidents))
            return list(incidents)

        self.items = list(incidents)
        self.error = None
        return self.items

    def get(self, incident_id: str) -> Optional[Incident]:
        for incident in self.items or []:
            if incident.id == incident_id:
                return incident
        return None

    def filter(self, status: Optional[Union[str, IncidentStatus]] = None) -> List[Incident]:
        """Incidents with the given status (all when None), in server order."""
        items = self.items or []
        if status is None:
            return list(items)
        wanted = IncidentStatus(status)
        return [incident for incident in items if incident.status == wanted]

    def merge(self, updated: Incident) -> List[Incident]:
        """
        Replace the record with the same id as updated.

        Raises:
            ReconciliationError: If the list is not loaded or holds no such id
        """
        if self.items is None:
            raise ReconciliationError(updated.id, message="Incident list is not loaded")

        for index, incident in enumerate(self.items):
            if incident.id == updated.id:
                self.items[index] = updated
                return self.items

        logger.warning("Updated incident not in loaded list", incident_id=updated.id)
        raise ReconciliationError(updated.id)

    async def transition(
        self,
        client: PagerDutyClient,
        incident_id: str,
        target_status: Union[str, IncidentStatus],
        note: Optional[str] = None,
    ) -> Incident:
        """
        Change one incident's status and merge the confirmed record.

        Only one update per incident may be in flight. The local status, when
        known, is used to reject invalid transitions before any request.

        Raises:
            UpdateInProgressError: If an update for incident_id is already in flight
            UpdateError: If the request failed
            InvalidTransitionError: If the move is not allowed from the local status
            ReconciliationError: If the confirmed record is not in the list
        """
        if incident_id in self._pending:
            raise UpdateInProgressError(incident_id)

        current = self.get(incident_id)
        self._pending.add(incident_id)
        try:
            updated = await client.update_status(
                incident_id,
                target_status,
                note=note,
                current_status=current.status if current else None,
            )
        finally:
            self._pending.discard(incident_id)

        self.merge(updated)
        return updated

    def actions_for(self, incident: Incident) -> List[str]:
        return available_actions(incident.status)
