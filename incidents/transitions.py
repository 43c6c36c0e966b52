"""Incident status transition table."""
from typing import Dict, FrozenSet, List, Optional, Union
from core.errors import InvalidTransitionError
from incidents.models import IncidentStatus

# current -> allowed next
ALLOWED_TRANSITIONS: Dict[IncidentStatus, FrozenSet[IncidentStatus]] = {
    IncidentStatus.TRIGGERED: frozenset({IncidentStatus.ACKNOWLEDGED, IncidentStatus.RESOLVED}),
    IncidentStatus.ACKNOWLEDGED: frozenset({IncidentStatus.RESOLVED}),
    IncidentStatus.RESOLVED: frozenset(),
}

# Action name shown to the user for each target status
ACTION_NAMES: Dict[IncidentStatus, str] = {
    IncidentStatus.ACKNOWLEDGED: "acknowledge",
    IncidentStatus.RESOLVED: "resolve",
}


def coerce_status(value: Union[str, IncidentStatus], current: Optional[str] = None) -> IncidentStatus:
    """Parse a target status, raising InvalidTransitionError for unknown values."""
    try:
        return IncidentStatus(value)
    except ValueError:
        raise InvalidTransitionError(
            current,
            str(value),
            message=f"Unknown incident status '{value}'"
        ) from None


def can_transition(current: IncidentStatus, target: IncidentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(
    current: Union[str, IncidentStatus],
    target: Union[str, IncidentStatus],
) -> IncidentStatus:
    """
    Check that target is reachable from current.

    Args:
        current: Current incident status
        target: Requested status

    Returns:
        The target as an IncidentStatus

    Raises:
        InvalidTransitionError: If the table does not allow the move
    """
    current_status = coerce_status(current)
    target_status = coerce_status(target, current=current_status.value)

    if not can_transition(current_status, target_status):
        if not ALLOWED_TRANSITIONS[current_status]:
            raise InvalidTransitionError(
                current_status.value,
                target_status.value,
                message=f"Incident is already {current_status.value}; no further status changes are allowed"
            )
        raise InvalidTransitionError(current_status.value, target_status.value)

    return target_status


def available_actions(current: IncidentStatus) -> List[str]:
    """Action names available from current, in lifecycle order."""
    return [
        ACTION_NAMES[status]
        for status in IncidentStatus
        if status in ALLOWED_TRANSITIONS[current]
    ]
