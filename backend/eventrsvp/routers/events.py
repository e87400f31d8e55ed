"""Event, RSVP and attendee API routes: delegates to the event and RSVP services.

Create and edit accept either a JSON body or multipart form data. In a form,
``location`` is a JSON string and ``image`` may be a file upload.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from eventrsvp.database import get_db
from eventrsvp.errors import InvalidInput
from eventrsvp.schemas.event import (
    AttendeePage,
    EventCreate,
    EventCreated,
    EventOut,
    EventPage,
    EventUpdate,
    EventUpdated,
)
from eventrsvp.schemas.rsvp import RSVPRequest, RSVPResponse, RSVPSummaryOut
from eventrsvp.security import TokenClaim, get_current_claim
from eventrsvp.services import event_service, rsvp_service
from eventrsvp.services.images import ImageStore, get_image_store
from eventrsvp.services.notifications import Notifier, get_notifier

logger = logging.getLogger(__name__)
router = APIRouter()

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
FORM_FIELDS = ("title", "description", "date", "maxAttendees", "image", "location")


@dataclass
class EventBody:
    fields: dict[str, Any] = field(default_factory=dict)
    upload: Optional[UploadFile] = None


async def read_event_body(request: Request) -> EventBody:
    """Read a create/edit body from either JSON or form data."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        body = EventBody()
        for name in FORM_FIELDS:
            value = form.get(name)
            if isinstance(value, UploadFile):
                if name == "image" and value.filename:
                    body.upload = value
            elif value:
                body.fields[name] = value
        return body

    try:
        data = await request.json()
    except ValueError:
        raise InvalidInput("Invalid request body")
    if not isinstance(data, dict):
        raise InvalidInput("Invalid request body")
    return EventBody(fields=data)


def _validate(model, fields: dict):
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        logger.info("Rejected event payload: %s", e.errors(include_url=False))
        raise RequestValidationError(e.errors(include_url=False))


@router.get("", response_model=EventPage)
def list_events(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List events ordered by date."""
    events, total, window = event_service.list_events(db, page, limit)
    return {"events": events, "total": total, "page": window.page, "total_pages": window.total_pages}


@router.post("", response_model=EventCreated)
def create_event(
    body: EventBody = Depends(read_event_body),
    db: Session = Depends(get_db),
    store: ImageStore = Depends(get_image_store),
):
    """Create an event; ``image`` may be an uploaded file, an http(s) URL or a base64 data URI."""
    payload = _validate(EventCreate, body.fields)
    event_service.check_required_fields(payload)
    image_ref = store.save(body.upload) if body.upload else None
    event = event_service.create_event(db, payload, uploaded_image=image_ref)
    return {"success": True, "data": event}


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.put("/{event_id}", response_model=EventUpdated)
def edit_event(
    event_id: str,
    body: EventBody = Depends(read_event_body),
    db: Session = Depends(get_db),
    store: ImageStore = Depends(get_image_store),
):
    """Partial update; only non-empty fields overwrite stored values."""
    payload = _validate(EventUpdate, body.fields)
    event_service.get_event(db, event_id)
    event_service.check_edit_fields(payload)
    image_ref = store.save(body.upload) if body.upload else None
    event = event_service.edit_event(db, event_id, payload, uploaded_image=image_ref)
    return {"message": "Event updated successfully", "event": event}


@router.post("/{event_id}/rsvp", response_model=RSVPResponse)
def rsvp_event(
    event_id: str,
    payload: RSVPRequest,
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """RSVP the authenticated account to an event."""
    event, attendee = rsvp_service.rsvp(db, event_id, claim.subject_id, payload.status, notifier)
    return {"message": "RSVP successful", "event": event, "attendee_id": attendee.attendee_id}


@router.get("/{event_id}/attendees", response_model=AttendeePage)
def list_attendees(
    event_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    attendees, total, window = event_service.list_attendees(db, event_id, page, limit)
    return {"attendees": attendees, "total": total, "page": window.page, "total_pages": window.total_pages}


@router.get("/{event_id}/rsvp-summary", response_model=RSVPSummaryOut)
def rsvp_summary(
    event_id: str,
    status: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Status counts for all attendees plus a page of attendees, optionally filtered by status."""
    result = rsvp_service.rsvp_summary(db, event_id, status, page, limit)
    return {
        "summary": {"going": result.going, "maybe": result.maybe, "cant_go": result.cant_go},
        "attendees": result.attendees,
        "total": result.total,
        "page": result.page,
        "total_pages": result.total_pages,
        "status_filter": result.status_filter,
    }
