"""Attendee ORM model: RSVP records embedded in an Event."""
import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventrsvp.database import Base


class RSVPStatus(str, enum.Enum):
    going = "Going"
    maybe = "Maybe"
    cant_go = "Can't Go"


class Attendee(Base):
    __tablename__ = "attendees"
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_attendee_event_email"),)

    # Insertion order of the attendee sequence.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)
    # Only confirmed ("Going") RSVPs get an identifier.
    attendee_id = Column(String(36), nullable=True, unique=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    status = Column(SAEnum(RSVPStatus), nullable=False, default=RSVPStatus.going)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    event = relationship("Event", back_populates="attendees")
