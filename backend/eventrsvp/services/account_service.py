"""Account service: registration, login and admin account management."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventrsvp.errors import Conflict, InvalidInput, NotFound
from eventrsvp.models.user import User, UserRole
from eventrsvp.schemas.user import LoginRequest, RegisterRequest
from eventrsvp.security import create_access_token, hash_password, verify_password
from eventrsvp.services import notifications
from eventrsvp.services.notifications import Notifier
from eventrsvp.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

ALLOWED_ROLES = {role.value for role in UserRole}


def clamp_role(role: Optional[str]) -> UserRole:
    """Registration input outside the allow-list silently becomes ``user``."""
    if role in ALLOWED_ROLES:
        return UserRole(role)
    return UserRole.user


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def register(db: Session, payload: RegisterRequest, notifier: Notifier) -> tuple[User, str]:
    """Create an account and return it with a fresh access token."""
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise Conflict("Email already registered")

    user = User(
        name=payload.name,
        email=email,
        password_hash=hash_password(payload.password),
        role=clamp_role(payload.role),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    db.refresh(user)
    logger.info("Registered user %s (%s) as %s", user.user_id, user.email, user.role.value)

    notifications.notify_registration(notifier, to=user.email, name=user.name)
    return user, create_access_token(user.user_id)


def login(db: Session, payload: LoginRequest) -> tuple[User, str]:
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.email)
        raise InvalidInput("Invalid credentials")
    return user, create_access_token(user.user_id)


def list_users(
    db: Session,
    raw_page: Optional[str] = None,
    raw_limit: Optional[str] = None,
) -> tuple[list[User], int, Page]:
    total = db.query(User).count()
    window = paginate(raw_page, raw_limit, total)
    users = (
        db.query(User)
        .order_by(User.created_at, User.user_id)
        .offset(window.offset)
        .limit(window.limit)
        .all()
    )
    return users, total, window


def delete_user(db: Session, user_id: str) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", user_id)


def update_role(db: Session, user_id: str, role: str) -> User:
    """Change a user's role; only values on the allow-list are accepted."""
    if role not in ALLOWED_ROLES:
        raise InvalidInput(f"Invalid role: {role}")
    user = get_user(db, user_id)
    user.role = UserRole(role)
    db.commit()
    db.refresh(user)
    logger.info("User %s role set to %s", user_id, role)
    return user
