"""Event aggregate service: create, edit, read, list and delete events.

Validation happens here, before anything touches the store:
- create requires title, description, date, maxAttendees and location.address
- images are validated by ``services.images`` on both create and edit
- edit only overwrites fields whose new value is truthy, so an empty string
  or 0 cannot clear a stored value
"""
import logging
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.orm import Session

from eventrsvp.errors import InvalidInput, NotFound
from eventrsvp.models.event import Event
from eventrsvp.schemas.event import EventCreate, EventUpdate, LocationIn
from eventrsvp.services.images import validate_image
from eventrsvp.services.pagination import Page, paginate, slice_page

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def _location_dict(location: LocationIn) -> dict:
    return {"address": location.address, "lat": location.lat, "lng": location.lng}


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


def check_required_fields(payload: EventCreate) -> None:
    location = payload.location
    if not (
        payload.title
        and payload.description
        and payload.date
        and payload.max_attendees
        and location
        and location.address
    ):
        raise InvalidInput("Missing required fields")


def create_event(db: Session, payload: EventCreate, uploaded_image: Optional[str] = None) -> Event:
    """Create an event. ``uploaded_image`` is a stored-file reference from a multipart upload."""
    check_required_fields(payload)
    location = payload.location

    image = uploaded_image
    if image is None and payload.image:
        image = validate_image(payload.image)

    event = Event(
        title=payload.title,
        description=payload.description,
        date=_as_utc(payload.date),
        max_attendees=int(payload.max_attendees),
        image=image,
    )
    event.location = _location_dict(location)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s)", event.title, event.event_id)
    return event


def check_edit_fields(payload: EventUpdate) -> Optional[str]:
    """Validate an edit before anything is stored; returns the validated image, if any."""
    image = validate_image(payload.image) if payload.image else None
    if payload.location and not payload.location.address:
        raise InvalidInput("Location address is required")
    return image


def edit_event(
    db: Session,
    event_id: str,
    payload: EventUpdate,
    uploaded_image: Optional[str] = None,
) -> Event:
    """Partial update. Only truthy supplied fields are applied."""
    event = get_event(db, event_id)

    image = check_edit_fields(payload)

    if payload.title:
        event.title = payload.title
    if payload.description:
        event.description = payload.description
    if payload.date:
        event.date = _as_utc(payload.date)
    if payload.max_attendees:
        event.max_attendees = int(payload.max_attendees)
    if image:
        event.image = image
    if payload.location:
        event.location = _location_dict(payload.location)
    if uploaded_image:
        event.image = uploaded_image

    db.commit()
    db.refresh(event)
    logger.info("Updated event %s", event_id)
    return event


def list_events(
    db: Session,
    raw_page: Optional[str] = None,
    raw_limit: Optional[str] = None,
) -> tuple[list[Event], int, Page]:
    """Events ordered by date ascending, one page at a time."""
    total = db.query(Event).count()
    window = paginate(raw_page, raw_limit, total)
    events = (
        db.query(Event)
        .order_by(Event.date.asc(), Event.event_id)
        .offset(window.offset)
        .limit(window.limit)
        .all()
    )
    return events, total, window


def list_attendees(
    db: Session,
    event_id: str,
    raw_page: Optional[str] = None,
    raw_limit: Optional[str] = None,
) -> tuple[list, int, Page]:
    event = get_event(db, event_id)
    attendees = list(event.attendees)
    window = paginate(raw_page, raw_limit, len(attendees))
    return slice_page(attendees, window), len(attendees), window


def delete_event(db: Session, event_id: str) -> None:
    event = get_event(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)
