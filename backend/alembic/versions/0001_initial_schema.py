"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Event RSVP application:
users, events, attendees.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum members are stored by name, matching SAEnum(UserRole) / SAEnum(RSVPStatus).
user_role = sa.Enum("user", "admin", name="userrole")
rsvp_status = sa.Enum("going", "maybe", "cant_go", name="rsvpstatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_attendees", sa.Integer, nullable=True),
        sa.Column("image", sa.Text, nullable=True),
        sa.Column("location_address", sa.String(500), nullable=False, server_default=""),
        sa.Column("location_lat", sa.Float, nullable=True),
        sa.Column("location_lng", sa.Float, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_date", "events", ["date"])

    # --- attendees ---
    op.create_table(
        "attendees",
        sa.Column("seq", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.String(36),
            sa.ForeignKey("events.event_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attendee_id", sa.String(36), nullable=True, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("status", rsvp_status, nullable=False, server_default="going"),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("event_id", "email", name="uq_attendee_event_email"),
    )
    op.create_index("ix_attendees_event_id", "attendees", ["event_id"])


def downgrade() -> None:
    op.drop_table("attendees")
    op.drop_table("events")
    op.drop_table("users")
    user_role.drop(op.get_bind(), checkfirst=True)
    rsvp_status.drop(op.get_bind(), checkfirst=True)
