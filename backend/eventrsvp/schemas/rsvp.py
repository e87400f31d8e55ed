"""Pydantic schemas for RSVP requests and summaries."""
from __future__ import annotations
from typing import Optional

from eventrsvp.schemas.common import CamelModel
from eventrsvp.schemas.event import AttendeeOut, EventOut


class RSVPRequest(CamelModel):
    status: str = "Going"  # validated by the RSVP service


class RSVPResponse(CamelModel):
    message: str
    event: EventOut
    attendee_id: Optional[str] = None


class StatusSummary(CamelModel):
    going: int
    maybe: int
    cant_go: int


class RSVPSummaryOut(CamelModel):
    summary: StatusSummary
    attendees: list[AttendeeOut]
    total: int
    page: int
    total_pages: int
    status_filter: str
