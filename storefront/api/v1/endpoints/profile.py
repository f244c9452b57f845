"""
Profile endpoints: the caller's own account, plus the admin user list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront.api.v1.deps import get_current_identity, get_user_repository, require_admin
from storefront.db.repositories import UserRepository
from storefront.models.user import User
from storefront.schemas.token import Identity
from storefront.schemas.user import ProfileUpdate, ProfileUpdateResponse, UserRead
from storefront.services import accounts

router = APIRouter(tags=["profile"])


@router.get("/me", response_model=UserRead)
async def read_me(
    identity: Identity = Depends(get_current_identity),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """Return the authenticated user's profile (never the credential)."""
    return await accounts.get_profile(users, identity.id)


@router.put("/me", response_model=ProfileUpdateResponse)
async def update_me(
    body: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    users: UserRepository = Depends(get_user_repository),
) -> ProfileUpdateResponse:
    """Update name / email / password and return a refreshed token."""
    user, token = await accounts.update_profile(users, identity.id, body)
    return ProfileUpdateResponse(user=UserRead.model_validate(user), token=token)


@router.get("/users", response_model=list[UserRead])
async def list_users(
    users: UserRepository = Depends(get_user_repository),
    _admin: Identity = Depends(require_admin),
) -> list[User]:
    return list(await users.list())
