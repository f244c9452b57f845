"""
Session token issuance / verification (JWT, HS256) and password hashing (bcrypt).

Tokens are stateless: validity is decided only by signature and expiry, so a
token stays usable until it expires even after the client logs out.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.core.config import settings
from storefront.core.exceptions import InvalidToken

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

_ALGORITHM = settings.ALGORITHM
_SECRET = settings.SECRET_KEY

_CLAIM_KEYS = ("id", "email", "role", "name")


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
def create_access_token(
    user: Any,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token carrying the user's id, email, role and name.

    *user* may be an ORM row or any object/mapping exposing those fields.
    """
    if isinstance(user, dict):
        claims = {key: user.get(key) for key in _CLAIM_KEYS}
    else:
        claims = {key: getattr(user, key) for key in _CLAIM_KEYS}
    claims["id"] = str(claims["id"])

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    )
    return jwt.encode(
        {**claims, "sub": claims["id"], "exp": expire, "type": "access"},
        _SECRET,
        algorithm=_ALGORITHM,
    )


def decode_access_token(token: str) -> dict:
    """Return the claims of a valid access token.

    Raises :class:`InvalidToken` on a bad signature, an expired token, a
    malformed token or a token missing the identity claims.
    """
    try:
        payload = jwt.decode(token, _SECRET, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise InvalidToken() from exc
    if payload.get("type") != "access" or not payload.get("id") or not payload.get("role"):
        raise InvalidToken()
    return payload
