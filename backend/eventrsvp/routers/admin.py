"""Admin routes: every endpoint requires an authenticated admin."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventrsvp.database import get_db
from eventrsvp.schemas.common import MessageOut
from eventrsvp.schemas.event import AdminEventPage
from eventrsvp.schemas.user import RoleUpdate, UserOut, UserPage
from eventrsvp.security import require_admin
from eventrsvp.services import account_service, event_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/users", response_model=UserPage)
def list_users(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    users, total, window = account_service.list_users(db, page, limit)
    return {"total": total, "page": window.page, "total_pages": window.total_pages, "data": users}


@router.delete("/users/{user_id}", response_model=MessageOut)
def delete_user(user_id: str, db: Session = Depends(get_db)):
    account_service.delete_user(db, user_id)
    return {"message": "User deleted"}


@router.patch("/users/{user_id}/role", response_model=UserOut)
def update_user_role(user_id: str, payload: RoleUpdate, db: Session = Depends(get_db)):
    """Change a user's role (user/admin only)."""
    return account_service.update_role(db, user_id, payload.role)


@router.get("/events", response_model=AdminEventPage)
def list_events(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """All events with their RSVPs."""
    events, total, window = event_service.list_events(db, page, limit)
    return {"total": total, "page": window.page, "total_pages": window.total_pages, "data": events}


@router.delete("/events/{event_id}", response_model=MessageOut)
def delete_event(event_id: str, db: Session = Depends(get_db)):
    event_service.delete_event(db, event_id)
    return {"message": "Event deleted"}
