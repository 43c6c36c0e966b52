"""Pydantic models for API requests and responses."""
from typing import List, Dict, Any, Optional, Literal
from pydantic import BaseModel, Field, field_validator


class IncidentItem(BaseModel):
    """One rendered row of the incident list."""
    id: str
    status: Literal["triggered", "acknowledged", "resolved"]
    title: str
    summary: str
    incident_number: int
    created_at: str
    urgency: Literal["high", "low"]
    url: str
    display_title: str = Field(..., description="'#<number>: <title>'")
    created_at_display: str = Field(..., description="Creation time in the display time zone")
    color: Literal["red", "yellow", "green"]
    actions: List[str] = Field(
        default_factory=list,
        description="Status actions available from the current status",
        examples=[["acknowledge", "resolve"]]
    )


class IncidentListResponse(BaseModel):
    """Response model for the incident list endpoint."""
    state: Literal["idle", "loading", "loaded", "error"]
    status_filter: Optional[str] = None
    total: int
    incidents: List[IncidentItem]


class ResolveRequest(BaseModel):
    """Request model for resolving an incident."""
    note: Optional[str] = Field(
        default=None,
        description="Optional resolution note added to the incident",
        max_length=65535
    )

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class IncidentActionResponse(BaseModel):
    """Response model for acknowledge/resolve actions."""
    incident: IncidentItem
    message: str


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    services: Dict[str, Any]
