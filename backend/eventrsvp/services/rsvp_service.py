"""RSVP engine and RSVP summary.

RSVP rules:
- one attendee record per email per event, whatever status is requested
- a "Going" RSVP is refused once the attendee count (all statuses) reaches
  max_attendees; "Maybe" and "Can't Go" are never refused for capacity
- only "Going" attendees receive an attendee id
- there is no update path: a second RSVP from the same account is rejected

The duplicate/capacity check and the insert run under a per-event lock plus a
row lock on the event, so concurrent RSVPs in one process are serialised and
cannot over-admit. The (event_id, email) unique constraint catches duplicates
that slip in from another process.
"""
import logging
import threading
import uuid
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventrsvp.errors import Conflict, InvalidInput, NotFound
from eventrsvp.models.attendee import Attendee, RSVPStatus
from eventrsvp.models.event import Event
from eventrsvp.models.user import User
from eventrsvp.services import notifications
from eventrsvp.services.event_service import get_event
from eventrsvp.services.notifications import Notifier
from eventrsvp.services.pagination import paginate, slice_page

logger = logging.getLogger(__name__)

STATUS_FILTER_ALL = "All"


class _EventLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


_registry_lock = threading.Lock()
# Entries live only while some request holds or waits on them.
_event_locks: dict[str, _EventLock] = {}


@contextmanager
def _event_lock(event_id: str):
    with _registry_lock:
        entry = _event_locks.get(event_id)
        if entry is None:
            entry = _event_locks[event_id] = _EventLock()
        entry.holders += 1
    try:
        with entry.lock:
            yield
    finally:
        with _registry_lock:
            entry.holders -= 1
            if entry.holders == 0:
                del _event_locks[event_id]


def parse_status(value: Optional[str]) -> RSVPStatus:
    try:
        return RSVPStatus(value)
    except ValueError:
        raise InvalidInput("Invalid RSVP status")


def rsvp(
    db: Session,
    event_id: str,
    user_id: str,
    status: str,
    notifier: Notifier,
) -> tuple[Event, Attendee]:
    """Record the caller's RSVP for an event and return (event, new attendee)."""
    rsvp_status = parse_status(status)

    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")

    get_event(db, event_id)

    with _event_lock(event_id):
        event = (
            db.query(Event)
            .filter(Event.event_id == event_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not event:
            raise NotFound("Event not found")

        attendees = db.query(Attendee).filter(Attendee.event_id == event_id)
        if attendees.filter(Attendee.email == user.email).first():
            logger.info("Rejected RSVP from %s to event %s: already responded", user.email, event_id)
            raise Conflict("Already RSVPd")

        count = attendees.count()
        if (
            rsvp_status == RSVPStatus.going
            and event.max_attendees is not None
            and count >= event.max_attendees
        ):
            logger.info("Rejected RSVP from %s to event %s: full (%d/%d)",
                        user.email, event_id, count, event.max_attendees)
            raise Conflict("Event is full")

        attendee = Attendee(
            event_id=event.event_id,
            attendee_id=str(uuid.uuid4()) if rsvp_status == RSVPStatus.going else None,
            name=user.name,
            email=user.email,
            status=rsvp_status,
            timestamp=datetime.now(timezone.utc),
        )
        db.add(attendee)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Rejected RSVP from %s to event %s: duplicate on commit", user.email, event_id)
            raise Conflict("Already RSVPd")
        db.refresh(event)
        db.refresh(attendee)

    logger.info("User %s RSVP'd '%s' to event %s", user.user_id, rsvp_status.value, event_id)
    notifications.notify_rsvp(
        notifier,
        to=user.email,
        name=user.name,
        event_title=event.title,
        event_date=event.date,
        address=event.location_address,
        status=rsvp_status.value,
        attendee_id=attendee.attendee_id,
    )
    return event, attendee


@dataclass
class RSVPSummary:
    going: int
    maybe: int
    cant_go: int
    attendees: list[Attendee]
    total: int
    page: int
    total_pages: int
    status_filter: str


def rsvp_summary(
    db: Session,
    event_id: str,
    status: Optional[str] = None,
    raw_page: Optional[str] = None,
    raw_limit: Optional[str] = None,
) -> RSVPSummary:
    """Status counts over all attendees plus a page of the (optionally filtered) list.

    Counts always cover the full attendee sequence; ``total`` and paging
    apply to the filtered list.
    """
    status_filter = parse_status(status) if status else None
    event = get_event(db, event_id)

    attendees = list(event.attendees)
    counts = Counter(a.status for a in attendees)

    if status_filter is None:
        working = attendees
    else:
        working = [a for a in attendees if a.status == status_filter]

    window = paginate(raw_page, raw_limit, len(working))
    return RSVPSummary(
        going=counts[RSVPStatus.going],
        maybe=counts[RSVPStatus.maybe],
        cant_go=counts[RSVPStatus.cant_go],
        attendees=slice_page(working, window),
        total=len(working),
        page=window.page,
        total_pages=window.total_pages,
        status_filter=status_filter.value if status_filter else STATUS_FILTER_ALL,
    )
