"""Pydantic schemas for session tokens."""

from __future__ import annotations

from pydantic import BaseModel

from storefront.schemas.user import UserRead


class Identity(BaseModel):
    """Claims carried by a verified token."""

    id: str
    email: str
    role: str
    name: str | None = None


class AuthResponse(BaseModel):
    token: str
    user: UserRead
