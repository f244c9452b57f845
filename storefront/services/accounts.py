"""
Signup, login and self-service profile edits.

Emails are compared case-insensitively; the role is fixed at signup
(``user``) and cannot be changed through these operations.
"""

from __future__ import annotations

import logging

from storefront.core.exceptions import Conflict, NotFound, Unauthenticated
from storefront.core.security import create_access_token, get_password_hash, verify_password
from storefront.db.repositories import UserRepository
from storefront.models.user import ROLE_USER, User
from storefront.schemas.user import LoginRequest, ProfileUpdate, SignupRequest

logger = logging.getLogger(__name__)


async def signup(users: UserRepository, body: SignupRequest) -> tuple[User, str]:
    """Register a new ``user`` account and return it with a fresh token."""
    if await users.get_by_email(body.email) is not None:
        raise Conflict("User already exists")
    user = await users.add(
        User(
            name=body.name,
            email=body.email,
            hashed_password=get_password_hash(body.password),
            role=ROLE_USER,
        )
    )
    logger.info("User %s signed up", user.email)
    return user, create_access_token(user)


async def login(users: UserRepository, body: LoginRequest) -> tuple[User, str]:
    user = await users.get_by_email(body.email)
    if user is None or not verify_password(body.password, user.hashed_password):
        logger.warning("Failed login for %s", body.email)
        raise Unauthenticated("Invalid credentials")
    return user, create_access_token(user)


async def get_profile(users: UserRepository, user_id: str) -> User:
    user = await users.get(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


async def update_profile(
    users: UserRepository, user_id: str, body: ProfileUpdate
) -> tuple[User, str]:
    """Apply name/email/password changes and re-issue the token.

    The new token reflects the updated claims; the old one stays valid
    until it expires.
    """
    user = await get_profile(users, user_id)
    changes: dict = {}
    if body.name:
        changes["name"] = body.name
    if body.email:
        other = await users.get_by_email(body.email)
        if other is not None and other.id != user.id:
            raise Conflict("Email already in use")
        changes["email"] = body.email
    if body.password:
        changes["hashed_password"] = get_password_hash(body.password)

    if changes:
        user = await users.update(user, changes)
        logger.info("User %s updated profile fields %s", user.id, sorted(changes))
    return user, create_access_token(user)
