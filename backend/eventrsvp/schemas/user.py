"""Pydantic schemas for accounts and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr

from eventrsvp.models.user import UserRole
from eventrsvp.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    name: str
    email: EmailStr
    password: str
    role: Optional[str] = None  # clamped to the allow-list server-side


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RoleUpdate(CamelModel):
    role: str


class UserOut(CamelModel):
    user_id: str
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    token: str
    user: UserOut


class UserPage(CamelModel):
    total: int
    page: int
    total_pages: int
    data: list[UserOut]
