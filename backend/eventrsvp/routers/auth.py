"""Registration, login and current-account routes."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventrsvp.database import get_db
from eventrsvp.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserOut
from eventrsvp.security import TokenClaim, get_current_claim
from eventrsvp.services import account_service
from eventrsvp.services.notifications import Notifier, get_notifier

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Create an account; the role is clamped to user/admin (default user)."""
    user, token = account_service.register(db, payload, notifier)
    return {"token": token, "user": user}


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, token = account_service.login(db, payload)
    return {"token": token, "user": user}


@router.get("/me", response_model=UserOut)
def me(claim: TokenClaim = Depends(get_current_claim), db: Session = Depends(get_db)):
    """Return the authenticated account (never the credential)."""
    return account_service.get_user(db, claim.subject_id)
