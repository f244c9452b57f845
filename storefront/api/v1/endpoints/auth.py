"""
Auth endpoints — signup and login, both returning a session token.

Logout is purely client-side (drop the stored token); tokens are stateless
and remain valid until they expire.
"""

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from storefront.api.v1.deps import get_user_repository
from storefront.core.config import settings
from storefront.db.repositories import UserRepository
from storefront.schemas.token import AuthResponse
from storefront.schemas.user import LoginRequest, SignupRequest, UserRead
from storefront.services import accounts

# Rate limiter keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse)
async def signup(
    body: SignupRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AuthResponse:
    """Create a ``user`` account. 409 if the email is already registered."""
    user, token = await accounts.signup(users, body)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AuthResponse:
    """Authenticate with email/password. 401 on any mismatch."""
    user, token = await accounts.login(users, body)
    return AuthResponse(token=token, user=UserRead.model_validate(user))
