"""Pydantic schemas for Events and their attendees."""
from __future__ import annotations
import json
from datetime import datetime
from typing import Any, Optional
from pydantic import field_validator

from eventrsvp.models.attendee import RSVPStatus
from eventrsvp.schemas.common import CamelModel


class LocationIn(CamelModel):
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


def _parse_location(value: Any) -> Any:
    # Multipart forms send location as a JSON string.
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            raise ValueError("location must be an object or a JSON string")
    return value


class EventCreate(CamelModel):
    """Required fields are checked by the service so a single error can be reported."""

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    max_attendees: Optional[int] = None
    image: Optional[str] = None
    location: Optional[LocationIn] = None

    @field_validator("location", mode="before")
    @classmethod
    def parse_location(cls, value: Any) -> Any:
        return _parse_location(value)


class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    max_attendees: Optional[int] = None
    image: Optional[str] = None
    location: Optional[LocationIn] = None

    @field_validator("location", mode="before")
    @classmethod
    def parse_location(cls, value: Any) -> Any:
        return _parse_location(value)


class LocationOut(CamelModel):
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None


class AttendeeOut(CamelModel):
    attendee_id: Optional[str] = None
    name: str
    email: str
    status: RSVPStatus
    timestamp: datetime


class EventOut(CamelModel):
    event_id: str
    title: str
    description: Optional[str] = None
    date: datetime
    max_attendees: Optional[int] = None
    image: Optional[str] = None
    location: LocationOut
    attendees: list[AttendeeOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventCreated(CamelModel):
    success: bool = True
    data: EventOut


class EventUpdated(CamelModel):
    message: str
    event: EventOut


class EventPage(CamelModel):
    events: list[EventOut]
    total: int
    page: int
    total_pages: int


class AdminEventPage(CamelModel):
    total: int
    page: int
    total_pages: int
    data: list[EventOut]


class AttendeePage(CamelModel):
    attendees: list[AttendeeOut]
    total: int
    page: int
    total_pages: int
