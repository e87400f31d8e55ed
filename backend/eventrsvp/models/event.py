"""Event ORM model: the aggregate that owns its attendee sequence."""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Integer, Float
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventrsvp.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    max_attendees = Column(Integer, nullable=True)  # NULL = unbounded
    image = Column(Text, nullable=True)  # URI or base64 data URI
    location_address = Column(String(500), nullable=False, default="")
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    attendees = relationship(
        "Attendee",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Attendee.seq",
    )

    @property
    def location(self) -> dict:
        return {
            "address": self.location_address,
            "lat": self.location_lat,
            "lng": self.location_lng,
        }

    @location.setter
    def location(self, value: dict) -> None:
        self.location_address = value.get("address") or ""
        self.location_lat = value.get("lat")
        self.location_lng = value.get("lng")
