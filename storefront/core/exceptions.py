"""
Domain error taxonomy and global exception handlers.

Every error reaches the client as ``{"error": str}``; validation failures
additionally carry ``{"details": [str, ...]}``.  Stack traces never leak.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Taxonomy ────────────────────────────────────────────────────────
class StorefrontError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None, details: list[str] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Unauthenticated(StorefrontError):
    status_code = 401
    default_message = "Authentication required"


class MissingToken(Unauthenticated):
    default_message = "Missing token"


class InvalidToken(Unauthenticated):
    default_message = "Invalid token"


class Forbidden(StorefrontError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class ValidationError(StorefrontError):
    default_message = "Validation failed"


class Conflict(StorefrontError):
    status_code = 409
    default_message = "Conflict"


class InvalidQuantity(StorefrontError):
    default_message = "Quantity must be a positive integer"


class EmptyCart(StorefrontError):
    default_message = "Cart is empty"


class InvalidOrder(StorefrontError):
    default_message = "Invalid order"


def _error_body(message: str, details: list[str] | None = None) -> dict:
    body: dict = {"error": message}
    if details:
        body["details"] = details
    return body


def format_validation_errors(errors: list[dict]) -> list[str]:
    """Flatten pydantic error dicts into ``"field: message"`` strings."""
    out = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        out.append(f"{field}: {msg}" if field else msg)
    return out


# ── Handlers ────────────────────────────────────────────────────────
async def _storefront_error_handler(_request: Request, exc: StorefrontError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.details),
        headers=headers,
    )


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=_error_body("Validation failed", format_validation_errors(exc.errors())),
    )


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded: %s", exc.detail)
    return JSONResponse(
        status_code=429,
        content=_error_body(f"Rate limit exceeded: {exc.detail}"),
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content=_error_body("Database constraint violation"),
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal database error"),
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(StorefrontError, _storefront_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
