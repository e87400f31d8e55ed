"""Credentials and access-control gates.

Passwords are hashed with argon2 through passlib; bearer tokens are HS256
JWTs carrying the account id in ``sub``. ``TokenClaim`` is only ever built by
``decode_access_token``.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from eventrsvp.config import settings
from eventrsvp.database import get_db
from eventrsvp.errors import Forbidden, Unauthorized
from eventrsvp.models.user import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenClaim:
    subject_id: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token for ``subject_id`` that expires after ``expires_delta`` (default from settings)."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(
        {"sub": subject_id, "exp": expire},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> Optional[TokenClaim]:
    """Verify signature and expiry; return None for anything unusable."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    subject_id = payload.get("sub")
    if not subject_id:
        return None
    return TokenClaim(subject_id=str(subject_id))


def get_current_claim(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaim:
    """Gate: a valid, unexpired bearer token must be presented."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Unauthorized")
    claim = decode_access_token(credentials.credentials)
    if claim is None:
        raise Unauthorized("Invalid token")
    return claim


def require_admin(
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
) -> User:
    """Gate: the authenticated account must hold the admin role."""
    user = db.query(User).filter(User.user_id == claim.subject_id).first()
    if not user or user.role != UserRole.admin:
        logger.info("Admin access denied for subject %s", claim.subject_id)
        raise Forbidden()
    return user
