"""
Auth gate — turns a bearer token into an identity and checks roles.

Both checks are side-effect free.  ``authenticate`` must run before
``require_role``; callers treat any failure as a rejected request.
"""

from __future__ import annotations

from storefront.core.exceptions import Forbidden, InvalidToken, MissingToken
from storefront.core.security import decode_access_token
from storefront.schemas.token import Identity


def authenticate(token: str | None) -> Identity:
    """Verify *token* and return the identity it asserts.

    Raises :class:`MissingToken` when no credential was supplied and
    :class:`InvalidToken` when verification fails.
    """
    if not token:
        raise MissingToken()
    claims = decode_access_token(token)
    try:
        return Identity(
            id=claims["id"],
            email=claims["email"],
            role=claims["role"],
            name=claims.get("name"),
        )
    except (KeyError, ValueError) as exc:
        raise InvalidToken() from exc


def require_role(identity: Identity, role: str) -> None:
    if identity.role != role:
        raise Forbidden(f"{role.capitalize()} privileges required")
